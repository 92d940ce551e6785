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

import datetime
import dateutil.tz

from calendarkit.dateops import parseDateTime, parseGeo, startDateTime
from calendarkit.errors import PropertyFormatError
from calendarkit.ical import Calendar, Event, Property
from calendarkit.stdconfig import config
from calendarkit.test.util import TestCase
from calendarkit.timezones import TimezoneException

class DateTime (TestCase):
    """
    Date and date-time values
    """

    def test_utc(self):
        value = parseDateTime(Property("DTSTAMP", "20210101T093000Z"))
        self.assertEqual(value, datetime.datetime(2021, 1, 1, 9, 30, tzinfo=dateutil.tz.tzutc()))
        self.assertEqual(value.utcoffset(), datetime.timedelta(0))


    def test_date(self):
        value = parseDateTime(Property("DTSTART", "20210102", {"VALUE": "DATE"}))
        self.assertEqual(value, datetime.date(2021, 1, 2))
        self.assertFalse(isinstance(value, datetime.datetime))


    def test_tzid(self):
        value = parseDateTime(Property("DTSTART", "20210305T100000", {"TZID": "America/New_York"}))
        self.assertEqual(value.utcoffset(), datetime.timedelta(hours=-5))
        self.assertEqual(value.astimezone(dateutil.tz.tzutc()).hour, 15)


    def test_floating(self):
        """
        Floating values stay naive unless a default zone applies.
        """
        property = Property("DTSTART", "20210305T100000")
        self.assertEqual(parseDateTime(property).tzinfo, None)
        self.assertEqual(
            parseDateTime(property, defaultTimezone="Europe/London").utcoffset(),
            datetime.timedelta(0),
        )

        config.DefaultTimezone = "Asia/Tokyo"
        self.assertEqual(parseDateTime(property).utcoffset(), datetime.timedelta(hours=9))


    def test_calendarTimezone(self):
        """
        A floating value in a calendar with a VTIMEZONE uses that zone.
        """
        calendar = Calendar.fromString(self.dataText("meeting.ics"))
        property = Property("DTSTART", "20210305T100000")
        calendar.events()[0].replaceProperty(property)
        self.assertEqual(parseDateTime(property).utcoffset(), datetime.timedelta(hours=-5))


    def test_invalid(self):
        for value in ("2021-01-01", "20210101Tnoon", "20211301"):
            self.assertRaises(PropertyFormatError, parseDateTime, Property("DTSTART", value))


    def test_unknownTimezone(self):
        self.assertRaises(
            TimezoneException,
            parseDateTime, Property("DTSTART", "20210305T100000", {"TZID": "Mars/Olympus"}),
        )


    def test_startDateTime(self):
        event = Event()
        self.assertEqual(startDateTime(event), None)

        event.addProperty(Property("DTSTAMP", "20210101T000000Z"))
        self.assertEqual(startDateTime(event), datetime.datetime(2021, 1, 1, tzinfo=dateutil.tz.tzutc()))

        event.addProperty(Property("DTSTART", "20210102", {"VALUE": "DATE"}))
        self.assertEqual(startDateTime(event), datetime.date(2021, 1, 2))



class Geo (TestCase):
    """
    GEO values
    """

    def test_geo(self):
        self.assertEqual(parseGeo(Property("GEO", "40.7128;-74.0060")), (40.7128, -74.006))


    def test_invalid(self):
        for value in ("40.7128", "north;west", "1;2;3"):
            self.assertRaises(PropertyFormatError, parseGeo, Property("GEO", value))
