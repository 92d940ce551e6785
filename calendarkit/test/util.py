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

__all__ = [
    "TestCase",
    "dataPath",
]

from twisted.logger import globalLogPublisher
from twisted.python.filepath import FilePath
from twisted.trial import unittest

from calendarkit.stdconfig import DEFAULT_CONFIG, PListConfigProvider, config

dataPath = FilePath(__file__).sibling("data")



class TestCase (unittest.TestCase):
    """
    Base test case: every test starts and ends with the default
    configuration.
    """

    def setUp(self):
        super(TestCase, self).setUp()
        config.setProvider(PListConfigProvider(DEFAULT_CONFIG))
        config.update()
        self.addCleanup(self._resetConfig)


    def _resetConfig(self):
        config.setProvider(PListConfigProvider(DEFAULT_CONFIG))
        config.update()


    def dataText(self, name):
        """
        @return: the decoded contents of C{name} in the test data directory.
        """
        return dataPath.child(name).getContent().decode("utf-8")


    def observeLogs(self):
        """
        Collect the log events emitted while the test runs.

        @return: a C{list} that events are appended to
        """
        events = []
        globalLogPublisher.addObserver(events.append)
        self.addCleanup(globalLogPublisher.removeObserver, events.append)
        return events
