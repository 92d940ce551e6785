# -*- test-case-name: calendarkit.test.test_timezones -*-
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
Timezone identifier lookup against the Olson database shipped with pytz.

Only identifiers are resolved here; VTIMEZONE definitions found in calendar
data are kept as ordinary components and never interpreted.
"""

__all__ = [
    "TimezoneException",
    "hasTZ",
    "readTZ",
    "listTZs",
]

import pytz

from twisted.logger import Logger

log = Logger()

class TimezoneException(Exception):
    pass

# zoneinfo never changes in a running instance so cache all this data as we use it
cachedTZs = {}
cachedTZIDs = []

def hasTZ(tzid):
    """
    Check if the specified TZID is available. Try to load it if not and raise if it
    cannot be found.
    """

    if tzid not in cachedTZs:
        readTZ(tzid)
    return True



def readTZ(tzid):
    """
    Try to load the specified TZID from the database. Raise if not found.

    @param tzid: an Olson identifier such as C{"America/New_York"}
    @return: a pytz C{tzinfo}
    @raise TimezoneException: if C{tzid} is unknown
    """

    if tzid not in cachedTZs:
        try:
            cachedTZs[tzid] = pytz.timezone(tzid)
        except pytz.UnknownTimeZoneError:
            log.debug("Unknown time zone: {tzid}", tzid=tzid)
            raise TimezoneException("Unknown time zone: %s" % (tzid,))

    return cachedTZs[tzid]



def listTZs():
    """
    List all timezones in the database.
    """

    if not cachedTZIDs:
        cachedTZIDs.extend(sorted(pytz.all_timezones))
    return cachedTZIDs
