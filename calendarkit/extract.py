# -*- test-case-name: calendarkit.test.test_extract -*-
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
Component extraction over preprocessed calendar text.

All functions here expect text that has been through
L{calendarkit.text.preprocess}, so that C{BEGIN}/C{END} markers and property
records each sit on their own line.
"""

__all__ = [
    "extractComponents",
    "extractUnknownComponents",
    "tokenizeRecords",
]

import re

from twisted.logger import Logger

from calendarkit.errors import StructuralError
from calendarkit.text import TERMINATOR

log = Logger()

_lineEnd = r"[ \t]*(?=\r\n|\Z)"
_anyBegin = re.compile(r"^BEGIN:([^\r\n:;]+?)" + _lineEnd, re.IGNORECASE | re.MULTILINE)
_boundary = re.compile(r"^(?:BEGIN|END):", re.IGNORECASE)

# Only the kinds the document model knows are cached; other names come
# from the input and are compiled per call.
_cachedTags = frozenset([
    "VCALENDAR", "VEVENT", "VTODO", "VJOURNAL", "VFREEBUSY",
    "VTIMEZONE", "STANDARD", "DAYLIGHT", "VALARM",
])
_patternCache = {}



def _compilePatterns(tag):
    escaped = re.escape(tag)
    flags = re.IGNORECASE | re.MULTILINE
    return (
        re.compile(
            "^BEGIN:%s%s(.*?)^END:%s%s" % (escaped, _lineEnd, escaped, _lineEnd),
            flags | re.DOTALL,
        ),
        re.compile("^BEGIN:%s%s" % (escaped, _lineEnd), flags),
        re.compile("^END:%s%s" % (escaped, _lineEnd), flags),
    )



def _patterns(tag):
    """
    @return: a C{(span, begin, end)} tuple of compiled patterns for C{tag}.
    """
    key = tag.upper()
    if key not in _cachedTags:
        return _compilePatterns(key)
    if key not in _patternCache:
        _patternCache[key] = _compilePatterns(key)
    return _patternCache[key]



def extractComponents(tag, text):
    """
    Find and remove every C{BEGIN:<tag>...END:<tag>} span in C{text}.

    Spans are matched non-greedily and case-insensitively. They are removed
    from the end of the text backwards so that earlier offsets stay valid.

    @param tag: the component name, e.g. C{"VEVENT"}
    @type tag: C{str}
    @param text: preprocessed calendar text
    @type text: C{str}
    @return: a C{(matches, remaining)} tuple where C{matches} is a C{list}
        of the inner text of each span in source order and C{remaining} is
        C{text} with the spans removed
    @raise StructuralError: if spans are nested inside spans of the same
        tag or a C{BEGIN}/C{END} marker for C{tag} is left unmatched
    """
    span, begin, end = _patterns(tag)

    found = list(span.finditer(text))
    for match in found:
        if begin.search(match.group(1)):
            raise StructuralError(
                "Ambiguous nesting of %s components" % (tag.upper(),)
            )

    matches = []
    for match in reversed(found):
        matches.append(match.group(1))
        text = text[:match.start()] + text[match.end():]
    matches.reverse()

    if begin.search(text):
        raise StructuralError("Unterminated %s component" % (tag.upper(),))
    if end.search(text):
        raise StructuralError("END:%s without matching BEGIN" % (tag.upper(),))

    if matches:
        log.debug("Extracted {count} {tag} component(s)", count=len(matches), tag=tag.upper())
    return matches, text



def extractUnknownComponents(text):
    """
    Remove every remaining nested component, whatever its name.

    This is applied after all of a component's known child kinds have been
    extracted, so that the properties of unsupported or misplaced
    components are never read as properties of the enclosing component.

    @param text: preprocessed calendar text
    @type text: C{str}
    @return: a C{(names, remaining)} tuple where C{names} lists the
        (upper-cased) name of each removed component in source order
    @raise StructuralError: if a removed component is malformed
    """
    names = []
    while True:
        match = _anyBegin.search(text)
        if match is None:
            break
        tag = match.group(1).upper()
        matches, text = extractComponents(tag, text)
        names.extend([tag] * len(matches))
    return names, text



def tokenizeRecords(text):
    """
    Split preprocessed text, with all nested components already removed,
    into property records.

    @param text: preprocessed calendar text
    @type text: C{str}
    @return: a C{list} of non-blank content lines
    @raise StructuralError: if a C{BEGIN} or C{END} marker is still present
    """
    records = []
    for line in text.split(TERMINATOR):
        if not line.strip():
            continue
        if _boundary.match(line):
            raise StructuralError("Unexpected component boundary %r" % (line,))
        records.append(line)
    return records
