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

from twisted.logger import LogLevel

from calendarkit.errors import (
    MalformedParameter, MissingName, UnknownPropertyError
)
from calendarkit.registry import (
    Cardinality, EventProperty, isExtensionName, registryForComponent
)
from calendarkit.test.util import TestCase

class Registry (TestCase):
    """
    Property tables
    """

    def test_cardinality(self):
        registry = registryForComponent("VEVENT")
        self.assertIs(registry.cardinality("UID"), Cardinality.singleton)
        self.assertIs(registry.cardinality("uid"), Cardinality.singleton)
        self.assertIs(registry.cardinality(EventProperty.ATTENDEE), Cardinality.repeatable)
        self.assertIs(registry.cardinality("X-ANYTHING"), Cardinality.repeatable)
        self.assertIs(registry.cardinality("iana-token"), Cardinality.repeatable)
        self.assertRaises(UnknownPropertyError, registry.cardinality, "TZOFFSETTO")


    def test_perKind(self):
        """
        The same name can have a different cardinality in another kind.
        """
        self.assertIs(registryForComponent("VEVENT").cardinality("DESCRIPTION"), Cardinality.singleton)
        self.assertIs(registryForComponent("VJOURNAL").cardinality("DESCRIPTION"), Cardinality.repeatable)
        self.assertIs(registryForComponent("DAYLIGHT").cardinality("TZNAME"), Cardinality.repeatable)
        self.assertIs(registryForComponent("VALARM").cardinality("TRIGGER"), Cardinality.singleton)


    def test_names(self):
        self.assertEqual(
            registryForComponent("vcalendar").names(),
            ["PRODID", "VERSION", "CALSCALE", "METHOD"],
        )
        self.assertEqual(
            registryForComponent("STANDARD").names(),
            registryForComponent("DAYLIGHT").names(),
        )


    def test_known(self):
        registry = registryForComponent("VTIMEZONE")
        self.assertTrue(registry.isKnown("tzid"))
        self.assertFalse(registry.isKnown("X-TZ"))
        self.assertTrue(registry.isExtension("X-TZ"))


    def test_unknownKind(self):
        self.assertRaises(KeyError, registryForComponent, "VCARD")


    def test_extensionNames(self):
        self.assertTrue(isExtensionName("x-foo"))
        self.assertTrue(isExtensionName("IANA-bar"))
        self.assertFalse(isExtensionName("XFOO"))
        self.assertFalse(isExtensionName("SUMMARY"))



class Consume (TestCase):
    """
    Turning records into properties
    """

    def test_order(self):
        """
        Properties come out in table order, then extensions in source order;
        unknown records are dropped.
        """
        events = self.observeLogs()
        properties = registryForComponent("VEVENT").consume([
            "SUMMARY:s",
            "X-B:1",
            "UID:u",
            "ATTENDEE:mailto:a1",
            "FOO:bar",
            "X-A:2",
            "ATTENDEE:mailto:a2",
        ])
        self.assertEqual(
            [(p.name(), p.value()) for p in properties],
            [
                ("UID", "u"),
                ("SUMMARY", "s"),
                ("ATTENDEE", "mailto:a1"),
                ("ATTENDEE", "mailto:a2"),
                ("X-B", "1"),
                ("X-A", "2"),
            ]
        )
        self.assertTrue([
            event for event in events
            if event.get("log_level") == LogLevel.warn and event.get("name") == "FOO"
        ])


    def test_duplicateSingleton(self):
        events = self.observeLogs()
        properties = registryForComponent("VEVENT").consume(["UID:1", "uid:2"])
        self.assertEqual([p.value() for p in properties], ["1"])
        self.assertTrue([
            event for event in events
            if event.get("log_level") == LogLevel.warn and event.get("name") == "UID"
        ])


    def test_droppedRecordsNotParsed(self):
        """
        A malformed record that is dropped anyway is not an error.
        """
        properties = registryForComponent("VEVENT").consume(["UID:1", "FOO;bad:x"])
        self.assertEqual([p.name() for p in properties], ["UID"])


    def test_missingName(self):
        self.assertRaises(MissingName, registryForComponent("VEVENT").consume, ["UID:1", ":x"])


    def test_malformedConsumed(self):
        self.assertRaises(
            MalformedParameter,
            registryForComponent("VEVENT").consume,
            ["ATTENDEE;RSVP:mailto:x@example.com"],
        )
