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
iCalendar document interfaces
"""

__all__ = [
    "ITextable",
    "IProperty",
    "IComponent",
]

from zope.interface import Attribute, Interface



class ITextable(Interface):
    """
    An object with an iCalendar text representation.
    """

    def text():
        """
        @return: the iCalendar text for this object, each content line
            ending in CRLF.
        @rtype: C{str}
        """



class IProperty(ITextable):
    """
    A single C{NAME;PARAM=VALUE:VALUE} record owned by a component.
    """

    def name():
        """
        @return: the property name, or C{""} if the property has not been
            named yet.
        """

    def value():
        """
        @return: the property value.
        """

    def parameterNames():
        """
        @return: a C{list} of parameter names in insertion order.
        """

    def parameterValue(name, default=None):
        """
        Look up a parameter value, ignoring the case of C{name}.
        """



class IComponent(ITextable):
    """
    A C{BEGIN:<TAG>}/C{END:<TAG>} delimited node of a calendar tree.
    """

    tag = Attribute("The iCalendar name of this component kind.")

    def properties(name=None):
        """
        @return: a C{list} of L{IProperty} providers in stored order,
            restricted to C{name} when given.
        """

    def getProperty(name):
        """
        @return: the first L{IProperty} called C{name} or C{None}.
        """

    def setProperties(properties, name):
        """
        Replace the properties called C{name}.
        """

    def addProperties(properties, name):
        """
        Add properties called C{name}.
        """

    def removeAllProperties(name):
        """
        Remove every property called C{name}.
        """

    def subcomponents(name=None):
        """
        @return: a C{list} of child L{IComponent} providers.
        """
