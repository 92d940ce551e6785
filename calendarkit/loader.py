# -*- test-case-name: calendarkit.test.test_loader -*-
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
Reading and writing C{.ics} files.
"""

__all__ = [
    "decodeCalendarData",
    "loadCalendars",
    "writeCalendars",
]

from twisted.logger import Logger
from twisted.python.filepath import FilePath

from calendarkit.errors import EncodingError, InvalidCalendarFileError
from calendarkit.ical import parse, serialize

log = Logger()

_BOM = u"\ufeff"



def _calendarFilePath(path):
    if not isinstance(path, FilePath):
        path = FilePath(path)
    if path.splitext()[1].lower() != ".ics":
        raise InvalidCalendarFileError(
            "Not an iCalendar file (expected a .ics extension): %s" % (path.path,)
        )
    return path



def decodeCalendarData(data, encoding="utf-8"):
    """
    Decode raw calendar bytes.

    @param data: the raw bytes
    @type data: C{bytes}
    @param encoding: the codec to decode with
    @return: the decoded text, without a leading byte order mark
    @rtype: C{str}
    @raise EncodingError: if C{data} cannot be decoded with C{encoding}
    """
    try:
        text = data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise EncodingError("Cannot decode calendar data as %s: %s" % (encoding, e,))

    # No BOMs please
    if text.startswith(_BOM):
        text = text[len(_BOM):]
    return text



def loadCalendars(path, encoding="utf-8"):
    """
    Read and parse every calendar in a local C{.ics} file.

    @param path: a file name or L{FilePath}
    @param encoding: the codec the file is written in
    @return: a C{list} of L{calendarkit.ical.Calendar}
    @raise InvalidCalendarFileError: if C{path} is not an existing C{.ics} file
    @raise EncodingError: if the file cannot be decoded
    """
    path = _calendarFilePath(path)
    if not path.isfile():
        raise InvalidCalendarFileError("No such calendar file: %s" % (path.path,))

    log.debug("Loading calendars from {path}", path=path.path)
    return parse(decodeCalendarData(path.getContent(), encoding))



def writeCalendars(path, calendars, encoding="utf-8"):
    """
    Serialize calendars into a local C{.ics} file, replacing its contents.

    @param path: a file name or L{FilePath}
    @param calendars: an iterable of L{calendarkit.ical.Calendar}
    @param encoding: the codec to write with
    @raise InvalidCalendarFileError: if C{path} does not name a C{.ics} file
    @raise EncodingError: if the text cannot be encoded with C{encoding}
    """
    path = _calendarFilePath(path)
    try:
        data = serialize(calendars).encode(encoding)
    except (UnicodeEncodeError, LookupError) as e:
        raise EncodingError("Cannot encode calendar data as %s: %s" % (encoding, e,))

    log.debug("Writing calendars to {path}", path=path.path)
    path.setContent(data)
