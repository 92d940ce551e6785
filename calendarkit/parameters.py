# -*- test-case-name: calendarkit.test.test_parameters -*-
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
Attendee parameter values.
"""

__all__ = [
    "CUTYPE",
    "PARTSTAT",
    "ROLE",
    "RSVP",
    "Attendee",
]

from constantly import ValueConstant, Values

from calendarkit.property import Property



class CUTYPE(Values):
    """
    Calendar user type of an attendee.
    """
    INDIVIDUAL = ValueConstant("INDIVIDUAL")
    GROUP = ValueConstant("GROUP")
    RESOURCE = ValueConstant("RESOURCE")
    ROOM = ValueConstant("ROOM")
    UNKNOWN = ValueConstant("UNKNOWN")



class PARTSTAT(Values):
    """
    Participation status of an attendee.
    """
    NEEDS_ACTION = ValueConstant("NEEDS-ACTION")
    ACCEPTED = ValueConstant("ACCEPTED")
    DECLINED = ValueConstant("DECLINED")
    TENTATIVE = ValueConstant("TENTATIVE")
    DELEGATED = ValueConstant("DELEGATED")
    COMPLETED = ValueConstant("COMPLETED")
    IN_PROCESS = ValueConstant("IN-PROCESS")



class ROLE(Values):
    """
    Participation role of an attendee.
    """
    CHAIR = ValueConstant("CHAIR")
    REQ_PARTICIPANT = ValueConstant("REQ-PARTICIPANT")
    OPT_PARTICIPANT = ValueConstant("OPT-PARTICIPANT")
    NON_PARTICIPANT = ValueConstant("NON-PARTICIPANT")



class RSVP(Values):
    TRUE = ValueConstant("TRUE")
    FALSE = ValueConstant("FALSE")



def Attendee(address, **params):
    """
    Create an C{ATTENDEE} property.

        Attendee(
            "mailto:jane@example.com",
            CN="Jane Doe",
            PARTSTAT=PARTSTAT.ACCEPTED,
            RSVP=RSVP.TRUE,
        )

    Parameter names use C{_} where the iCalendar name has C{-}
    (C{DELEGATED_TO} for C{DELEGATED-TO}).

    @param address: the calendar user address, usually a C{mailto:} URI
    @param params: parameter values as C{str} or L{ValueConstant}
    @return: an unattached L{Property}
    """
    converted = {}
    for key, value in sorted(params.items()):
        if isinstance(value, ValueConstant):
            value = value.value
        converted[key.replace("_", "-")] = value
    return Property("ATTENDEE", address, converted)
