# -*- test-case-name: calendarkit.test.test_property -*-
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
iCalendar properties: the L{Property} node and the content line parser.
"""

__all__ = [
    "Property",
    "parseProperty",
    "propertyName",
    "nameFor",
]

import re

from constantly import ValueConstant
from twisted.python.util import InsensitiveDict
from zope.interface import implementer

from calendarkit.config import config
from calendarkit.errors import (
    MalformedParameter, MissingName, MissingValue, PropertyFormatError
)
from calendarkit.iical import IProperty
from calendarkit.text import TERMINATOR, foldLine

# Parameter values containing any of these must be quoted
_quoteTriggers = frozenset(":;,")

# A value holding DQUOTE must be a list of quoted strings and plain items
_quotedList = re.compile(r'^(?:"[^"]*"|[^",;:]*)(?:,(?:"[^"]*"|[^",;:]*))*\Z')



def nameFor(key):
    """
    @param key: a property name or a L{ValueConstant} naming one
    @return: the property name as a C{str}
    """
    if isinstance(key, ValueConstant):
        return key.value
    return key



def _checkValue(value):
    if "\r" in value or "\n" in value:
        raise PropertyFormatError("Property value may not contain a line terminator", value)
    return value



def _checkParameter(key, value):
    if '"' in value and not _quotedList.match(value):
        raise MalformedParameter(
            "Parameter value may only contain DQUOTE around quoted strings",
            "%s=%s" % (key, value,),
        )
    return _unquoteParameter(value)



@implementer(IProperty)
class Property (object):
    """
    iCalendar Property
    """

    def __init__(self, name, value, params=None):
        """
        @param name: the property's name; C{None} or C{""} leaves the property
            unnamed until it is added to a component.
        @param value: the property's value, exactly as it appears in
            calendar text (escapes are not interpreted).
        @param params: a mapping of parameter names to (unquoted) values.
        """
        self._name = nameFor(name) or ""
        self._value = _checkValue(value)
        self._params = InsensitiveDict(preserve=1)
        if params:
            for key, paramvalue in params.items():
                self._params[key] = _checkParameter(key, paramvalue)
        self._parent = None


    def __str__(self):
        """
        The canonical, unfolded content line without its terminator.
        """
        name = self._name.upper()
        if not self._params:
            return "%s:%s" % (name, self._value,)

        # Parameters whose values carry a colon first, then the rest; each
        # group in descending key order.
        items = [(key.upper(), value) for key, value in self._params.items()]
        withColon = sorted([item for item in items if ":" in item[1]], reverse=True)
        withoutColon = sorted([item for item in items if ":" not in item[1]], reverse=True)

        params = "".join([
            ";%s=%s" % (key, _quoteParameter(value),)
            for key, value in withColon + withoutColon
        ])
        return "%s%s:%s" % (name, params, self._value,)


    def __repr__(self):
        return "<%s: %r: %r>" % (self.__class__.__name__, self.name(), self.value())


    def __hash__(self):
        return hash(str(self))


    def __ne__(self, other):
        return not self.__eq__(other)


    def __eq__(self, other):
        if not isinstance(other, Property):
            return False
        return (
            self._name.upper() == other._name.upper() and
            self._value == other._value and
            self._canonicalParameters() == other._canonicalParameters()
        )


    def _canonicalParameters(self):
        return sorted([(key.upper(), value) for key, value in self._params.items()])


    def text(self):
        """
        Serialize this property as a (possibly folded) content line ending
        in CRLF.
        """
        if not self._name:
            raise MissingName("Cannot serialize an unnamed property", self._value)
        line = str(self)
        if config.Serialization.FoldLines:
            line = foldLine(line, config.Serialization.FoldLength)
        return line + TERMINATOR


    def duplicate(self):
        """
        Duplicate this property. The copy does not belong to any component.
        """
        return Property(self._name, self._value, self._params)


    def name(self):
        return self._name


    def setName(self, name):
        self._name = nameFor(name) or ""


    def value(self):
        return self._value


    def setValue(self, value):
        self._value = _checkValue(value)


    def parent(self):
        """
        @return: the component owning this property, or C{None}.
        """
        return self._parent


    def parameterNames(self):
        """
        Returns a list containing parameter names for this property, in the
        order they were added.
        """
        return list(self._params.keys())


    def parameterValue(self, name, default=None):
        """
        Returns the value of the given parameter, ignoring the case of
        C{name}, or C{default}.
        """
        return self._params.get(name, default)


    def parameters(self):
        """
        @return: a copy of the parameters as a case-insensitive mapping.
        """
        return InsensitiveDict(self._params, preserve=1)


    def hasParameter(self, paramname):
        return paramname in self._params


    def setParameter(self, paramname, paramvalue):
        """
        @param paramvalue: the unquoted value, or a list of quoted strings
            such as C{"a","b"}
        @raise MalformedParameter: if C{paramvalue} holds a stray C{"}
        """
        self._params[paramname] = _checkParameter(paramname, paramvalue)


    def removeParameter(self, paramname):
        if paramname in self._params:
            del self._params[paramname]


    def removeAllParameters(self):
        self._params = InsensitiveDict(preserve=1)



def _quoteParameter(value):
    if '"' in value:
        # A checked list of quoted strings, e.g. MEMBER="a","b"
        return value
    if _quoteTriggers.intersection(value):
        return '"%s"' % (value,)
    return value



def _unquoteParameter(value):
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"' and '"' not in value[1:-1]:
        return value[1:-1]
    return value



def _splitName(line, record):
    """
    @return: a C{(name, index)} tuple where C{index} is the position of the
        C{;} or C{:} that ends the name.
    """
    for index, char in enumerate(line):
        if char in ";:":
            name = line[:index].strip()
            if not name:
                raise MissingName("Empty property name", record)
            return name, index
    raise MissingName("Cannot isolate property name", record)



def propertyName(record):
    """
    Isolate the name of a property record without parsing the rest of it.

    @param record: a content line, optionally bounded by terminators
    @type record: C{str}
    @return: the property name
    @rtype: C{str}
    @raise MissingName: if no name can be isolated
    """
    return _splitName(record.strip(TERMINATOR), record)[0]



def parseProperty(record, name=None):
    """
    Parse one content line into a L{Property}.

    The name runs up to the first C{;} or C{:}. A C{:} first means the bare
    C{NAME:VALUE} form. Otherwise the parameter list runs up to the first
    C{:} outside double quotes, so quoted values such as
    C{DELEGATED-TO="mailto:a@example.com"} stay intact; everything after
    that colon is the value.

    @param record: a content line, optionally bounded by terminators
    @type record: C{str}
    @param name: the expected property name, or C{None} to take the name
        from the record
    @return: the parsed L{Property}
    @raise MissingName: if the name cannot be isolated or is not C{name}
    @raise MissingValue: if the value cannot be isolated
    @raise MalformedParameter: if a parameter is not C{KEY=VALUE}
    """
    line = record.strip(TERMINATOR)
    pname, index = _splitName(line, record)
    if name is not None and pname.upper() != nameFor(name).upper():
        raise MissingName("Expected a %s property" % (nameFor(name),), record)

    if line[index] == ":":
        return Property(pname, line[index + 1:])

    params = InsensitiveDict(preserve=1)
    inQuotes = False
    start = index + 1
    for position in range(index + 1, len(line)):
        char = line[position]
        if char == '"':
            inQuotes = not inQuotes
        elif not inQuotes and char in ";:":
            _addParameter(params, line[start:position], record)
            start = position + 1
            if char == ":":
                return Property(pname, line[position + 1:], params)

    raise MissingValue("Cannot isolate property value", record)



def _addParameter(params, segment, record):
    key, sep, value = segment.partition("=")
    key = key.strip()
    if not sep or not key:
        raise MalformedParameter("Parameter is not KEY=VALUE", record)
    params[key] = _unquoteParameter(value)
