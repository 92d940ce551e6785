# -*- test-case-name: calendarkit.test.test_dateops -*-
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
Date/time Utilities
"""

__all__ = [
    "parseDateTime",
    "parseGeo",
    "startDateTime",
]

import datetime
import dateutil.tz

from calendarkit.config import config
from calendarkit.errors import PropertyFormatError
from calendarkit.timezones import readTZ

_utc = dateutil.tz.tzutc()



def _calendarTimezoneID(property):
    """
    @return: the TZID of the first VTIMEZONE of the calendar owning
        C{property}, or C{None}.
    """
    node = property.parent()
    while node is not None and node.parent() is not None:
        node = node.parent()
    if node is None or node.tag != "VCALENDAR":
        return None
    for timezone in node.subcomponents("VTIMEZONE"):
        tzid = timezone.propertyValue("TZID")
        if tzid:
            return tzid
    return None



def parseDateTime(property, defaultTimezone=None):
    """
    Interpret a DATE or DATE-TIME property value.

    A trailing C{Z} means UTC. Otherwise the C{TZID} parameter names the
    zone. Floating values are placed in C{defaultTimezone}, else in the
    first VTIMEZONE of the owning calendar, else in
    C{config.DefaultTimezone}; if none of those is set the result is naive.

    @param property: the L{Property} to interpret, e.g. C{DTSTART}
    @param defaultTimezone: a TZID for floating values, or C{None}
    @return: a C{datetime.date} for DATE values, otherwise a
        C{datetime.datetime}
    @raise PropertyFormatError: if the value is not a date or date-time
    @raise TimezoneException: if a TZID is unknown
    """
    value = property.value().strip()

    if "T" not in value.upper():
        try:
            return datetime.datetime.strptime(value, "%Y%m%d").date()
        except ValueError:
            raise PropertyFormatError("Invalid DATE value", value)

    utc = value[-1:] in ("Z", "z")
    if utc:
        value = value[:-1]
    try:
        dt = datetime.datetime.strptime(value.upper(), "%Y%m%dT%H%M%S")
    except ValueError:
        raise PropertyFormatError("Invalid DATE-TIME value", property.value())

    if utc:
        return dt.replace(tzinfo=_utc)

    tzid = (
        property.parameterValue("TZID") or
        defaultTimezone or
        _calendarTimezoneID(property) or
        config.DefaultTimezone
    )
    if not tzid:
        return dt
    return readTZ(tzid).localize(dt)



def parseGeo(property):
    """
    @param property: a C{GEO} L{Property}, whose value is C{latitude;longitude}
    @return: a C{(latitude, longitude)} tuple of C{float}
    @raise PropertyFormatError: if the value is not two numbers
    """
    parts = property.value().split(";")
    if len(parts) != 2:
        raise PropertyFormatError("GEO value is not latitude;longitude", property.value())
    try:
        return (float(parts[0]), float(parts[1]),)
    except ValueError:
        raise PropertyFormatError("GEO value is not numeric", property.value())



def startDateTime(component, defaultTimezone=None):
    """
    Start of an event or to-do, falling back to its C{DTSTAMP} when there
    is no C{DTSTART}.

    @param component: a L{calendarkit.ical.Component}
    @param defaultTimezone: passed to L{parseDateTime}
    @return: a C{date} or C{datetime}, or C{None} if the component has
        neither property
    """
    for name in ("DTSTART", "DTSTAMP",):
        property = component.getProperty(name)
        if property is not None:
            return parseDateTime(property, defaultTimezone)
    return None
