# -*- test-case-name: calendarkit.test.test_text -*-
##
# Copyright (c) 2017 Apple Inc. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
##

"""
Content line utilities: unfolding raw calendar text into one record per line
and folding long lines on the way out.
"""

__all__ = [
    "TERMINATOR",
    "preprocess",
    "foldLine",
]

import re

TERMINATOR = "\r\n"

_terminators = re.compile(r"\r\n|\r|\n")
_spaceRuns = re.compile(r" {2,}")
_folds = re.compile(r"\r\n[ \t]")
_blankLines = re.compile(r"(?:\r\n){2,}")



def preprocess(text):
    """
    Normalize decoded calendar text so that every logical content line sits
    on its own line, bounded by a terminator on both sides.

    Steps, in order: terminators are normalized to CRLF; runs of spaces are
    collapsed; folded lines are spliced back together (CRLF followed by one
    space or tab); runs of blank lines are collapsed; and finally every
    terminator is doubled so each record has a leading and a trailing
    boundary. A literal C{\\n} escape inside a value is left alone.

    C{preprocess(preprocess(text)) == preprocess(text)}.

    @param text: the decoded calendar data
    @type text: C{str}
    @return: the normalized text
    @rtype: C{str}
    """
    text = _terminators.sub(TERMINATOR, text)
    text = _spaceRuns.sub(" ", text)

    # A splice can expose another fold (CRLF CRLF TAB SPACE)
    count = 1
    while count:
        text, count = _folds.subn("", text)
    text = _spaceRuns.sub(" ", text)

    text = _blankLines.sub(TERMINATOR, text)
    if not text.endswith(TERMINATOR):
        text += TERMINATOR
    return text.replace(TERMINATOR, TERMINATOR * 2)



def foldLine(line, length=75):
    """
    Fold a single content line (without its terminator) so that no physical
    line is longer than C{length} UTF-8 octets.

    Multi-byte characters are never split, and a continuation never begins
    with whitespace, so that L{preprocess} restores the original line.

    @param line: the content line
    @type line: C{str}
    @param length: maximum octets per physical line
    @type length: C{int}
    @return: the folded line, continuation lines joined with CRLF SPACE
    @rtype: C{str}
    """
    if len(line.encode("utf-8")) <= length:
        return line

    chunks = []
    current = ""
    size = 0
    limit = length
    for char in line:
        charSize = len(char.encode("utf-8"))
        if current and size + charSize > limit:
            split = len(current)
            if char in " \t":
                split -= 1
                while split > 0 and current[split] in " \t":
                    split -= 1
            if split > 0:
                chunks.append(current[:split])
                current = current[split:]
                size = len(current.encode("utf-8"))
                # Continuation lines carry the leading space
                limit = length - 1
        current += char
        size += charSize
    chunks.append(current)

    return (TERMINATOR + " ").join(chunks)
