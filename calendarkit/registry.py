# -*- test-case-name: calendarkit.test.test_registry -*-
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
Per-component property tables.

Each component kind knows which property names it accepts and how many of
each it may hold. The tables are ordered, and that order is also the order
in which parsed properties are stored and serialized.
"""

__all__ = [
    "Cardinality",
    "EXTENSION_PREFIXES",
    "isExtensionName",
    "CalendarProperty",
    "EventProperty",
    "TodoProperty",
    "JournalProperty",
    "FreeBusyProperty",
    "TimezoneProperty",
    "ObservanceProperty",
    "AlarmProperty",
    "PropertyRegistry",
    "registryForComponent",
]

from constantly import NamedConstant, Names, ValueConstant, Values
from twisted.logger import Logger

from calendarkit.errors import UnknownPropertyError
from calendarkit.property import nameFor, parseProperty, propertyName

log = Logger()

EXTENSION_PREFIXES = ("X-", "IANA-")



def isExtensionName(name):
    """
    @return: C{True} if C{name} is an experimental or IANA extension
        property name, which every component kind accepts any number of.
    """
    return nameFor(name).upper().startswith(EXTENSION_PREFIXES)



class Cardinality(Names):
    """
    How many properties of a given name a component may hold.
    """
    singleton = NamedConstant()
    singleton.description = "at most one"

    repeatable = NamedConstant()
    repeatable.description = "any number, in insertion order"



class CalendarProperty(Values):
    """
    VCALENDAR properties
    """
    PRODID = ValueConstant("PRODID")
    VERSION = ValueConstant("VERSION")
    CALSCALE = ValueConstant("CALSCALE")
    METHOD = ValueConstant("METHOD")



class EventProperty(Values):
    """
    VEVENT properties
    """
    DTSTAMP = ValueConstant("DTSTAMP")
    UID = ValueConstant("UID")
    DTSTART = ValueConstant("DTSTART")
    RRULE = ValueConstant("RRULE")
    DTEND = ValueConstant("DTEND")
    DURATION = ValueConstant("DURATION")
    CLASS = ValueConstant("CLASS")
    CREATED = ValueConstant("CREATED")
    DESCRIPTION = ValueConstant("DESCRIPTION")
    GEO = ValueConstant("GEO")
    LAST_MODIFIED = ValueConstant("LAST-MODIFIED")
    LOCATION = ValueConstant("LOCATION")
    PRIORITY = ValueConstant("PRIORITY")
    SEQUENCE = ValueConstant("SEQUENCE")
    STATUS = ValueConstant("STATUS")
    SUMMARY = ValueConstant("SUMMARY")
    TRANSP = ValueConstant("TRANSP")
    URL = ValueConstant("URL")
    RECURRENCE_ID = ValueConstant("RECURRENCE-ID")
    ORGANIZER = ValueConstant("ORGANIZER")
    ATTACH = ValueConstant("ATTACH")
    ATTENDEE = ValueConstant("ATTENDEE")
    CATEGORIES = ValueConstant("CATEGORIES")
    COMMENT = ValueConstant("COMMENT")
    CONTACT = ValueConstant("CONTACT")
    EXDATE = ValueConstant("EXDATE")
    REQUEST_STATUS = ValueConstant("REQUEST-STATUS")
    RELATED_TO = ValueConstant("RELATED-TO")
    RESOURCES = ValueConstant("RESOURCES")
    RDATE = ValueConstant("RDATE")



class TodoProperty(Values):
    """
    VTODO properties
    """
    DTSTAMP = ValueConstant("DTSTAMP")
    UID = ValueConstant("UID")
    CLASS = ValueConstant("CLASS")
    COMPLETED = ValueConstant("COMPLETED")
    CREATED = ValueConstant("CREATED")
    DESCRIPTION = ValueConstant("DESCRIPTION")
    DTSTART = ValueConstant("DTSTART")
    GEO = ValueConstant("GEO")
    LAST_MODIFIED = ValueConstant("LAST-MODIFIED")
    LOCATION = ValueConstant("LOCATION")
    ORGANIZER = ValueConstant("ORGANIZER")
    PERCENT_COMPLETE = ValueConstant("PERCENT-COMPLETE")
    PRIORITY = ValueConstant("PRIORITY")
    RECURRENCE_ID = ValueConstant("RECURRENCE-ID")
    SEQUENCE = ValueConstant("SEQUENCE")
    STATUS = ValueConstant("STATUS")
    SUMMARY = ValueConstant("SUMMARY")
    URL = ValueConstant("URL")
    RRULE = ValueConstant("RRULE")
    DUE = ValueConstant("DUE")
    DURATION = ValueConstant("DURATION")
    ATTACH = ValueConstant("ATTACH")
    ATTENDEE = ValueConstant("ATTENDEE")
    CATEGORIES = ValueConstant("CATEGORIES")
    COMMENT = ValueConstant("COMMENT")
    CONTACT = ValueConstant("CONTACT")
    EXDATE = ValueConstant("EXDATE")
    REQUEST_STATUS = ValueConstant("REQUEST-STATUS")
    RELATED_TO = ValueConstant("RELATED-TO")
    RESOURCES = ValueConstant("RESOURCES")
    RDATE = ValueConstant("RDATE")



class JournalProperty(Values):
    """
    VJOURNAL properties
    """
    DTSTAMP = ValueConstant("DTSTAMP")
    UID = ValueConstant("UID")
    CLASS = ValueConstant("CLASS")
    CREATED = ValueConstant("CREATED")
    DTSTART = ValueConstant("DTSTART")
    LAST_MODIFIED = ValueConstant("LAST-MODIFIED")
    ORGANIZER = ValueConstant("ORGANIZER")
    RECURRENCE_ID = ValueConstant("RECURRENCE-ID")
    SEQUENCE = ValueConstant("SEQUENCE")
    STATUS = ValueConstant("STATUS")
    SUMMARY = ValueConstant("SUMMARY")
    URL = ValueConstant("URL")
    RRULE = ValueConstant("RRULE")
    ATTACH = ValueConstant("ATTACH")
    ATTENDEE = ValueConstant("ATTENDEE")
    CATEGORIES = ValueConstant("CATEGORIES")
    COMMENT = ValueConstant("COMMENT")
    CONTACT = ValueConstant("CONTACT")
    DESCRIPTION = ValueConstant("DESCRIPTION")
    EXDATE = ValueConstant("EXDATE")
    RELATED_TO = ValueConstant("RELATED-TO")
    RDATE = ValueConstant("RDATE")
    REQUEST_STATUS = ValueConstant("REQUEST-STATUS")



class FreeBusyProperty(Values):
    """
    VFREEBUSY properties
    """
    DTSTAMP = ValueConstant("DTSTAMP")
    UID = ValueConstant("UID")
    CONTACT = ValueConstant("CONTACT")
    DTSTART = ValueConstant("DTSTART")
    DTEND = ValueConstant("DTEND")
    ORGANIZER = ValueConstant("ORGANIZER")
    URL = ValueConstant("URL")
    ATTENDEE = ValueConstant("ATTENDEE")
    COMMENT = ValueConstant("COMMENT")
    FREEBUSY = ValueConstant("FREEBUSY")
    REQUEST_STATUS = ValueConstant("REQUEST-STATUS")



class TimezoneProperty(Values):
    """
    VTIMEZONE properties
    """
    TZID = ValueConstant("TZID")
    LAST_MODIFIED = ValueConstant("LAST-MODIFIED")
    TZURL = ValueConstant("TZURL")



class ObservanceProperty(Values):
    """
    STANDARD and DAYLIGHT properties
    """
    DTSTART = ValueConstant("DTSTART")
    TZOFFSETTO = ValueConstant("TZOFFSETTO")
    TZOFFSETFROM = ValueConstant("TZOFFSETFROM")
    RRULE = ValueConstant("RRULE")
    COMMENT = ValueConstant("COMMENT")
    RDATE = ValueConstant("RDATE")
    TZNAME = ValueConstant("TZNAME")



class AlarmProperty(Values):
    """
    VALARM properties
    """
    ACTION = ValueConstant("ACTION")
    TRIGGER = ValueConstant("TRIGGER")
    DURATION = ValueConstant("DURATION")
    REPEAT = ValueConstant("REPEAT")
    DESCRIPTION = ValueConstant("DESCRIPTION")
    SUMMARY = ValueConstant("SUMMARY")
    ATTENDEE = ValueConstant("ATTENDEE")
    ATTACH = ValueConstant("ATTACH")



def _table(values, repeatable):
    """
    Build an ordered C{(name, cardinality)} table from the constants of
    C{values}, in definition order; names listed in C{repeatable} are
    repeatable, everything else is a singleton.
    """
    return tuple([
        (
            constant,
            Cardinality.repeatable if constant.value in repeatable else Cardinality.singleton,
        )
        for constant in values.iterconstants()
    ])

_componentRepeatables = frozenset((
    "ATTACH", "ATTENDEE", "CATEGORIES", "COMMENT", "CONTACT", "EXDATE",
    "REQUEST-STATUS", "RELATED-TO", "RESOURCES", "RDATE",
))

_journalRepeatables = frozenset((
    "ATTACH", "ATTENDEE", "CATEGORIES", "COMMENT", "CONTACT", "DESCRIPTION",
    "EXDATE", "RELATED-TO", "RDATE", "REQUEST-STATUS",
))

_tables = {
    "VCALENDAR": _table(CalendarProperty, ()),
    "VEVENT": _table(EventProperty, _componentRepeatables),
    "VTODO": _table(TodoProperty, _componentRepeatables),
    "VJOURNAL": _table(JournalProperty, _journalRepeatables),
    "VFREEBUSY": _table(FreeBusyProperty, ("ATTENDEE", "COMMENT", "FREEBUSY", "REQUEST-STATUS",)),
    "VTIMEZONE": _table(TimezoneProperty, ()),
    "STANDARD": _table(ObservanceProperty, ("COMMENT", "RDATE", "TZNAME",)),
    "DAYLIGHT": _table(ObservanceProperty, ("COMMENT", "RDATE", "TZNAME",)),
    "VALARM": _table(AlarmProperty, ("ATTENDEE", "ATTACH",)),
}



class PropertyRegistry (object):
    """
    The property table of one component kind.
    """

    def __init__(self, componentName, table):
        """
        @param componentName: the component kind, e.g. C{"VEVENT"}
        @param table: ordered C{(ValueConstant, Cardinality)} pairs
        """
        self.componentName = componentName
        self._table = table
        self._cardinalities = dict([
            (key.value.upper(), cardinality) for key, cardinality in table
        ])


    def __repr__(self):
        return "<%s: %s>" % (self.__class__.__name__, self.componentName,)


    def names(self):
        """
        @return: the registered property names in table order.
        """
        return [key.value for key, _ignore_cardinality in self._table]


    def isKnown(self, name):
        return nameFor(name).upper() in self._cardinalities


    def isExtension(self, name):
        return isExtensionName(name)


    def cardinality(self, name):
        """
        @param name: a property name or L{ValueConstant}
        @return: the L{Cardinality} of C{name}; extension names are always
            repeatable.
        @raise UnknownPropertyError: if C{name} is neither registered nor an
            extension name
        """
        name = nameFor(name)
        cardinality = self._cardinalities.get(name.upper())
        if cardinality is not None:
            return cardinality
        if isExtensionName(name):
            return Cardinality.repeatable
        raise UnknownPropertyError(
            "%s is not a %s property" % (name, self.componentName,)
        )


    def consume(self, records):
        """
        Turn the property records of one component into L{Property} objects.

        Records are taken in table order: a singleton takes the first record
        with its name (later ones are dropped), a repeatable name takes all
        of them in source order. Extension records follow in source order.
        Anything else is dropped.

        @param records: content lines belonging to this component
        @type records: C{list} of C{str}
        @return: a C{list} of L{Property}
        @raise PropertyFormatError: if a record's name cannot be isolated or
            a consumed record cannot be parsed
        """
        byName = {}
        named = []
        for record in records:
            name = propertyName(record).upper()
            byName.setdefault(name, []).append(record)
            named.append((name, record))

        results = []
        for key, cardinality in self._table:
            matches = byName.pop(key.value.upper(), [])
            if not matches:
                continue
            if cardinality is Cardinality.singleton:
                if len(matches) > 1:
                    log.warn(
                        "Dropping {count} duplicate {name} propert(ies) in {component}",
                        count=len(matches) - 1, name=key.value, component=self.componentName,
                    )
                matches = matches[:1]
            for record in matches:
                results.append(parseProperty(record, name=key))

        for name, record in named:
            if name in byName and isExtensionName(name):
                results.append(parseProperty(record, name=name))

        for name in byName:
            if not isExtensionName(name):
                log.warn(
                    "Dropping {count} unknown {name} propert(ies) in {component}",
                    count=len(byName[name]), name=name, component=self.componentName,
                )

        return results

_registries = dict([
    (componentName, PropertyRegistry(componentName, table))
    for componentName, table in _tables.items()
])



def registryForComponent(tag):
    """
    @param tag: a component name, e.g. C{"VEVENT"}
    @return: the L{PropertyRegistry} for C{tag}
    @raise KeyError: if C{tag} is not a supported component kind
    """
    return _registries[tag.upper()]
