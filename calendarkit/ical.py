# -*- test-case-name: calendarkit.test.test_ical -*-
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
iCalendar document model.

See RFC 5545: Internet Calendaring and Scheduling Core Object Specification
(iCalendar).
"""

__all__ = [
    "Component",
    "Calendar",
    "Event",
    "Todo",
    "Journal",
    "FreeBusy",
    "Timezone",
    "Standard",
    "Daylight",
    "Alarm",
    "Property",
    "InvalidICalendarDataError",
    "parse",
    "serialize",
]

import threading
from collections import Counter

from twisted.logger import Logger
from zope.interface import implementer

from calendarkit.config import config
from calendarkit.errors import (
    InvalidICalendarDataError, MissingName, StructuralError
)
from calendarkit.extract import (
    extractComponents, extractUnknownComponents, tokenizeRecords
)
from calendarkit.iical import IComponent
from calendarkit.property import Property, nameFor
from calendarkit.registry import Cardinality, registryForComponent
from calendarkit.text import TERMINATOR, preprocess

log = Logger()

# Held, before any node lock, while a property or component changes parent
_ownership = threading.RLock()



@implementer(IComponent)
class Component (object):
    """
    X{iCalendar} component.

    Subclasses set C{tag} to their iCalendar name and C{childTypes} to the
    component classes they may contain, in serialization order.
    """

    tag = None
    childTypes = ()

    @classmethod
    def fromText(cls, text):
        """
        Build a component from the preprocessed text between its C{BEGIN}
        and C{END} lines.

        Every allowed child kind is extracted (and built) before this
        component's own property records are read, so that a child's
        properties can never be taken for the parent's.

        @param text: preprocessed inner text of the component
        @type text: C{str}
        @return: a new, unattached instance of C{cls}
        @raise StructuralError: on bad component nesting
        @raise PropertyFormatError: on an unparseable property record
        """
        component = cls()

        for childType in cls.childTypes:
            matches, text = extractComponents(childType.tag, text)
            for inner in matches:
                child = childType.fromText(inner)
                child._parent = component
                component._components.append(child)

        names, text = extractUnknownComponents(text)
        if names:
            if config.Parsing.StrictComponents:
                raise StructuralError(
                    "%s may not contain %s" % (cls.tag, ", ".join(names),)
                )
            log.warn(
                "Dropping unsupported component(s) {names} in {tag}",
                names=", ".join(names), tag=cls.tag,
            )

        for property in component.registry().consume(tokenizeRecords(text)):
            property._parent = component
            component._properties.append(property)

        return component


    def __init__(self):
        self._properties = []
        self._components = []
        self._parent = None
        self._lock = threading.RLock()


    def __str__(self):
        return self.text()


    def __repr__(self):
        uid = self.propertyValue("UID")
        if uid is None:
            return "<%s>" % (self.__class__.__name__,)
        return "<%s: %r>" % (self.__class__.__name__, uid,)


    def __hash__(self):
        with self._lock:
            return hash((self.tag, tuple(sorted([str(p) for p in self._properties])),))


    def __ne__(self, other):
        return not self.__eq__(other)


    def __eq__(self, other):
        if not isinstance(other, Component) or self.tag != other.tag:
            return False
        if Counter(self.properties()) != Counter(other.properties()):
            return False
        for childType in self.childTypes:
            if self.subcomponents(childType.tag) != other.subcomponents(childType.tag):
                return False
        return True


    def name(self):
        return self.tag


    def registry(self):
        """
        @return: the L{PropertyRegistry} of this component kind.
        """
        return registryForComponent(self.tag)


    def parent(self):
        return self._parent


    def duplicate(self):
        """
        Duplicate this object and all its contents.
        @return: the duplicated component, not attached to any parent.
        """
        result = self.__class__()
        with self._lock:
            for property in self._properties:
                copy = property.duplicate()
                copy._parent = result
                result._properties.append(copy)
            for component in self._components:
                copy = component.duplicate()
                copy._parent = result
                result._components.append(copy)
        return result


    def text(self):
        """
        Serialize this component: its C{BEGIN} line, its properties in
        stored order, its children grouped by kind in C{childTypes} order,
        and its C{END} line.
        """
        with self._lock:
            lines = ["BEGIN:%s%s" % (self.tag, TERMINATOR,)]
            lines.extend([property.text() for property in self._properties])
            for childType in self.childTypes:
                lines.extend([
                    component.text() for component in self._components
                    if component.tag == childType.tag
                ])
            lines.append("END:%s%s" % (self.tag, TERMINATOR,))
            return "".join(lines)


    #
    # Properties
    #

    def properties(self, name=None):
        """
        @param name: if given and not C{None}, restricts the returned properties
            to those with the given C{name} (ignoring case).
        @return: a C{list} of L{Property} objects in stored order.
        """
        with self._lock:
            if name is None:
                return list(self._properties)
            name = nameFor(name).upper()
            return [p for p in self._properties if p.name().upper() == name]


    def getProperty(self, name):
        """
        Get one property from the property list.
        @param name: the name of the property to get.
        @return: the first L{Property} found or C{None}.
        """
        properties = self.properties(name)
        if properties:
            return properties[0]
        return None


    def propertyValue(self, name):
        property = self.getProperty(name)
        if property is None:
            return None
        return property.value()


    def hasProperty(self, name):
        """
        @param name: the name of the property whose existence is being tested.
        @return: True if the named property exists, False otherwise.
        """
        return self.getProperty(name) is not None


    def _claim(self, properties, name, replacing):
        """
        Check and name properties that are about to be stored.

        @param properties: a L{Property} or a sequence of them
        @param name: the name they are stored under
        @param replacing: whether properties already owned by this component
            may be passed (they are about to replace themselves)
        @return: a C{list} of L{Property}
        """
        if isinstance(properties, Property):
            properties = [properties]
        properties = list(properties)

        seen = set()
        for property in properties:
            if id(property) in seen:
                raise StructuralError("%r is passed more than once" % (property,))
            seen.add(id(property))
            owner = property.parent()
            if owner is not None and not (replacing and owner is self):
                raise StructuralError(
                    "%r already belongs to %r" % (property, owner,)
                )
            if not property.name():
                property.setName(name)
            elif property.name().upper() != name.upper():
                raise MissingName(
                    "Cannot store a %s property as %s" % (property.name(), name,)
                )
        return properties


    def _adopt(self, properties):
        for property in properties:
            property._parent = self


    def _disown(self, properties):
        for property in properties:
            property._parent = None


    def setProperties(self, properties, name):
        """
        Replace the properties called C{name}.

        For a singleton name only the first given property is kept; it
        takes the place of the existing one, or is appended. For a
        repeatable name the existing run is replaced in place by the given
        properties, or they are appended.

        @param properties: a L{Property} or a sequence of them; unnamed
            properties are given C{name}
        @param name: a property name or L{ValueConstant}
        @return: this component
        @raise UnknownPropertyError: if C{name} is not allowed here
        """
        name = nameFor(name)
        cardinality = self.registry().cardinality(name)

        with _ownership, self._lock:
            properties = self._claim(properties, name, replacing=True)
            if cardinality is Cardinality.singleton:
                properties = properties[:1]

            key = name.upper()
            indices = [
                index for index, property in enumerate(self._properties)
                if property.name().upper() == key
            ]
            self._disown([self._properties[index] for index in indices])
            if indices:
                remaining = [p for p in self._properties if p.name().upper() != key]
                # Nothing before the first match is removed
                remaining[indices[0]:indices[0]] = properties
                self._properties = remaining
            else:
                self._properties.extend(properties)
            self._adopt(properties)

        return self


    def addProperties(self, properties, name):
        """
        Add properties called C{name}.

        For a singleton name this is the same as L{setProperties}. For a
        repeatable name the properties go after the last existing one, or
        are appended.

        @param properties: a L{Property} or a sequence of them; unnamed
            properties are given C{name}
        @param name: a property name or L{ValueConstant}
        @return: this component
        @raise UnknownPropertyError: if C{name} is not allowed here
        """
        name = nameFor(name)
        if self.registry().cardinality(name) is Cardinality.singleton:
            return self.setProperties(properties, name)

        with _ownership, self._lock:
            properties = self._claim(properties, name, replacing=False)
            key = name.upper()
            indices = [
                index for index, property in enumerate(self._properties)
                if property.name().upper() == key
            ]
            if indices:
                position = indices[-1] + 1
                self._properties[position:position] = properties
            else:
                self._properties.extend(properties)
            self._adopt(properties)

        return self


    def removeAllProperties(self, name):
        """
        Remove every property called C{name}.
        @return: this component
        """
        key = nameFor(name).upper()
        with _ownership, self._lock:
            removed = [p for p in self._properties if p.name().upper() == key]
            self._properties = [p for p in self._properties if p.name().upper() != key]
            self._disown(removed)
        return self


    def addProperty(self, property):
        """
        Adds a property to this component.
        @param property: the named L{Property} to add to this component.
        @return: this component
        """
        return self.addProperties(property, property.name())


    def replaceProperty(self, property):
        """
        Add or replace a property in this component.
        @param property: the named L{Property} to add or replace in this component.
        @return: this component
        """
        return self.setProperties(property, property.name())


    def removeProperty(self, property):
        """
        Remove a property from this component.
        @param property: the L{Property} to remove from this component.
        @return: this component
        """
        with _ownership, self._lock:
            kept = [p for p in self._properties if p is not property]
            if len(kept) != len(self._properties):
                self._properties = kept
                property._parent = None
        return self


    #
    # Subcomponents
    #

    def subcomponents(self, name=None):
        """
        @param name: if given and not C{None}, restricts the returned
            components to those with the given C{name}.
        @return: a C{list} of L{Component} objects, one for each
            subcomponent of this component.
        """
        with self._lock:
            if name is None:
                return list(self._components)
            name = name.upper()
            return [c for c in self._components if c.tag == name]


    def addComponent(self, component):
        """
        Adds a subcomponent to this component.
        @param component: the unattached L{Component} to add as a
            subcomponent of this component.
        @return: this component
        @raise StructuralError: if C{component} already has a parent or is
            not allowed in this component
        """
        if not isinstance(component, self.childTypes):
            raise StructuralError(
                "%s may not contain %s" % (self.tag, getattr(component, "tag", component),)
            )
        with _ownership, self._lock:
            if component._parent is not None:
                raise StructuralError(
                    "%r already belongs to %r" % (component, component._parent,)
                )
            component._parent = self
            self._components.append(component)
        return self


    def removeComponent(self, component):
        """
        Removes a subcomponent from this component.
        @param component: the L{Component} to remove.
        @return: this component
        @raise StructuralError: if C{component} is not a child of this component
        """
        with _ownership, self._lock:
            kept = [c for c in self._components if c is not component]
            if len(kept) == len(self._components):
                raise StructuralError("%r is not a child of %r" % (component, self,))
            self._components = kept
            component._parent = None
        return self


    def timezoneIDs(self):
        """
        Returns the set of TZID parameter values appearing in any property in
        this component or its subcomponents.
        @return: a set of strings, one for each unique TZID value.
        """
        result = set()

        for property in self.properties():
            tzid = property.parameterValue("TZID")
            if tzid is not None:
                result.add(tzid)

        for component in self.subcomponents():
            result.update(component.timezoneIDs())

        return result



class Alarm (Component):
    tag = "VALARM"



class Standard (Component):
    tag = "STANDARD"



class Daylight (Component):
    tag = "DAYLIGHT"



class Timezone (Component):
    tag = "VTIMEZONE"
    childTypes = (Standard, Daylight,)

    def standards(self):
        return self.subcomponents(Standard.tag)


    def daylights(self):
        return self.subcomponents(Daylight.tag)



class Event (Component):
    tag = "VEVENT"
    childTypes = (Alarm,)

    def alarms(self):
        return self.subcomponents(Alarm.tag)



class Todo (Component):
    tag = "VTODO"
    childTypes = (Alarm,)

    def alarms(self):
        return self.subcomponents(Alarm.tag)



class Journal (Component):
    tag = "VJOURNAL"



class FreeBusy (Component):
    tag = "VFREEBUSY"



class Calendar (Component):
    """
    X{iCalendar} C{VCALENDAR} component, the root of a document tree.
    """

    tag = "VCALENDAR"
    childTypes = (Timezone, Event, Todo, Journal, FreeBusy,)

    @classmethod
    def allFromString(clazz, string):
        """
        Construct every calendar described by C{string}.
        @param string: a string containing iCalendar data.
        @return: a C{list} of L{Calendar}.
        """
        return parse(string)


    @classmethod
    def fromString(clazz, string):
        """
        Construct a L{Calendar} from a string.
        @param string: a string containing exactly one C{VCALENDAR}.
        @return: a L{Calendar} representing the calendar described by
            C{string}.
        @raise InvalidICalendarDataError: if C{string} does not hold
            exactly one calendar.
        """
        calendars = parse(string)
        if len(calendars) != 1:
            raise InvalidICalendarDataError(
                "Expected one VCALENDAR, found %d" % (len(calendars),)
            )
        return calendars[0]


    @classmethod
    def newCalendar(cls):
        """
        Create and return an empty C{VCALENDAR} component.

        @return: a new C{VCALENDAR} component with appropriate metadata
            properties already set (version, product ID).
        @rtype: an instance of this class
        """
        self = cls()
        self.addProperty(Property("VERSION", "2.0"))
        self.addProperty(Property("PRODID", config.ProductID))
        return self


    def events(self):
        return self.subcomponents(Event.tag)


    def todos(self):
        return self.subcomponents(Todo.tag)


    def journals(self):
        return self.subcomponents(Journal.tag)


    def freeBusys(self):
        return self.subcomponents(FreeBusy.tag)


    def timezones(self):
        return self.subcomponents(Timezone.tag)



def parse(text):
    """
    Parse calendar text into a document.

    @param text: decoded iCalendar data holding any number of concatenated
        C{VCALENDAR} blocks
    @type text: C{str}
    @return: a C{list} of L{Calendar}, in source order
    @raise StructuralError: on bad component nesting
    @raise PropertyFormatError: on an unparseable property record
    """
    matches, remaining = extractComponents(Calendar.tag, preprocess(text))

    leftover = [line for line in remaining.split(TERMINATOR) if line.strip()]
    if leftover:
        if config.Parsing.StrictComponents:
            raise StructuralError(
                "Unexpected content outside VCALENDAR: %r" % (leftover[0],)
            )
        log.warn(
            "Ignoring {count} line(s) outside VCALENDAR", count=len(leftover)
        )

    return [Calendar.fromText(inner) for inner in matches]



def serialize(calendars):
    """
    @param calendars: an iterable of L{Calendar}
    @return: the iCalendar text of every calendar, concatenated
    @rtype: C{str}
    """
    return "".join([calendar.text() for calendar in calendars])
