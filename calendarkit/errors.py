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
iCalendar parsing and loading errors.
"""

__all__ = [
    "InvalidICalendarDataError",
    "StructuralError",
    "PropertyFormatError",
    "MissingName",
    "MissingValue",
    "MalformedParameter",
    "UnknownPropertyError",
    "EncodingError",
    "InvalidCalendarFileError",
]



class InvalidICalendarDataError(ValueError):
    """
    Calendar data could not be turned into (or out of) a document tree.
    """



class StructuralError(InvalidICalendarDataError):
    """
    Component boundaries are unterminated, mismatched or ambiguous, or a
    tree operation would attach a component in a place it cannot live.
    """



class PropertyFormatError(InvalidICalendarDataError):
    """
    A property record could not be split into name, parameters and value.
    """
    def __init__(self, message, record=None):
        """
        @param message: description of the problem
        @param record: the offending content line, if there is one
        """
        if record is not None:
            message = "%s: %r" % (message, record,)
        super(PropertyFormatError, self).__init__(message)
        self.record = record



class MissingName(PropertyFormatError):
    """
    The property name could not be isolated.
    """



class MissingValue(PropertyFormatError):
    """
    The property value could not be isolated.
    """



class MalformedParameter(PropertyFormatError):
    """
    A parameter segment is not of the form C{KEY=VALUE}, or a parameter
    value holds a double quote outside a quoted string.
    """



class UnknownPropertyError(PropertyFormatError):
    """
    The property name is neither registered for the component kind nor an
    extension (C{X-} or C{IANA-}) name.
    """



class EncodingError(InvalidICalendarDataError):
    """
    Calendar bytes could not be decoded (or text could not be encoded).
    """



class InvalidCalendarFileError(InvalidICalendarDataError):
    """
    The loader was handed something that is not a local C{.ics} file.
    """
