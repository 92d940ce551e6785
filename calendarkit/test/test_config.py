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

from calendarkit.config import ConfigDict, ConfigurationError, mergeData
from calendarkit.stdconfig import (
    DEFAULT_CONFIG, PListConfigProvider, config, filteredObserver,
    logLevelPredicate
)
from calendarkit.test.util import TestCase

testConfig = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE plist PUBLIC "-//Apple Computer//DTD PLIST 1.0//EN" "http://www.apple.com/DTDs/PropertyList-1.0.dtd">
<plist version="1.0">
<dict>

  <key>ProductID</key>
  <string>-//Example//Test//EN</string>

  <key>Serialization</key>
  <dict>
    <key>FoldLength</key>
    <integer>60</integer>
  </dict>

  <key>DefaultLogLevel</key>
  <string>info</string>
  <key>LogLevels</key>
  <dict>
    <key>some.namespace</key>
    <string>debug</string>
  </dict>

  <key>NoSuchOption</key>
  <true/>

</dict>
</plist>
"""

class ConfigTests(TestCase):
    def setUp(self):
        TestCase.setUp(self)
        self.testConfig = self.mktemp()
        with open(self.testConfig, "w") as f:
            f.write(testConfig)

    def testDefaults(self):
        for key, value in DEFAULT_CONFIG.items():
            self.assertEquals(
                getattr(config, key), value,
                "config[%r] == %r, expected %r"
                % (key, getattr(config, key), value)
            )

    def testLoadConfig(self):
        self.assertEquals(config.Serialization.FoldLength, 75)

        config.load(self.testConfig)

        self.assertEquals(config.Serialization.FoldLength, 60)
        self.assertEquals(config.ProductID, "-//Example//Test//EN")

    def testMerge(self):
        """
        Loading a partial section keeps the other defaults of that section.
        """
        config.load(self.testConfig)

        self.assertEquals(config.Serialization.FoldLines, True)

    def testUnknownKeysDropped(self):
        config.load(self.testConfig)

        self.assertRaises(AttributeError, getattr, config, "NoSuchOption")

    def testMissingFile(self):
        self.assertRaises(ConfigurationError, config.load, self.mktemp())

    def testInvalidFile(self):
        with open(self.testConfig, "w") as f:
            f.write("<plist><dict><key>")

        self.assertRaises(ConfigurationError, config.load, self.testConfig)

    def _myUpdateHook(self, data):
        # A stub hook to record what it was given
        self._hookData = data

    def testPostUpdateHooks(self):
        self._hookData = None
        config.addPostUpdateHooks([self._myUpdateHook])
        self.addCleanup(config._postUpdateHooks.remove, self._myUpdateHook)

        config.load(self.testConfig)

        self.assertEquals(self._hookData.Serialization.FoldLength, 60)
        self.assertEquals(self._hookData.Serialization.FoldLines, True)

    def testUpdate(self):
        config.load(self.testConfig)

        config.update({"Serialization": {"FoldLength": 40}})

        self.assertEquals(config.Serialization.FoldLength, 40)
        self.assertEquals(config.ProductID, "-//Example//Test//EN")

    def testReset(self):
        config.load(self.testConfig)

        config.reset()

        self.assertEquals(config.Serialization.FoldLength, 75)
        self.assertEquals(config.ProductID, DEFAULT_CONFIG["ProductID"])

    def testSetAttr(self):
        self.assertNotIn("ProductID", config.__dict__)

        config.ProductID = "-//Example//Other//EN"

        self.assertNotIn("ProductID", config.__dict__)

        self.assertEquals(config.ProductID, "-//Example//Other//EN")

    def testCopiesDefaults(self):
        config.update({"Serialization": {"FoldLength": 40}})

        self.assertEquals(DEFAULT_CONFIG["Serialization"]["FoldLength"], 75)

    def testFoldLength(self):
        self.assertRaises(
            ConfigurationError,
            config.update, {"Serialization": {"FoldLength": 1}}
        )

    def testRejectedUpdateChangesNothing(self):
        self.assertRaises(
            ConfigurationError,
            config.update, {
                "Serialization": {"FoldLength": 1},
                "DefaultLogLevel": "debug",
            }
        )

        self.assertEquals(config.Serialization.FoldLength, 75)
        self.assertEquals(config.DefaultLogLevel, "warn")
        self.assertEquals(logLevelPredicate.logLevelForNamespace(None), LogLevel.warn)

    def test_logging(self):
        """
        Logging module configures properly.
        """
        self.assertEquals(logLevelPredicate.logLevelForNamespace(None), LogLevel.warn)
        self.assertEquals(logLevelPredicate.logLevelForNamespace("some.namespace"), LogLevel.warn)

        config.load(self.testConfig)

        self.assertEquals(logLevelPredicate.logLevelForNamespace(None), LogLevel.info)
        self.assertEquals(logLevelPredicate.logLevelForNamespace("some.namespace"), LogLevel.debug)

        config.reset()
        config.update()

        self.assertEquals(logLevelPredicate.logLevelForNamespace(None), LogLevel.warn)
        self.assertEquals(logLevelPredicate.logLevelForNamespace("some.namespace"), LogLevel.warn)

    def test_filteredObserver(self):
        """
        Wrapped observers only see events at or above the configured level.
        """
        events = []
        observer = filteredObserver(events.append)
        for level in (LogLevel.debug, LogLevel.info, LogLevel.warn):
            observer({
                "log_level": level,
                "log_namespace": "calendarkit.ical",
                "log_format": level.name,
            })
        self.assertEquals([event["log_format"] for event in events], ["warn"])

    def test_invalidLogLevel(self):
        self.assertRaises(
            ConfigurationError,
            config.update, {"DefaultLogLevel": "loud"}
        )

    def test_ConfigDict(self):
        configDict = ConfigDict({
            "a": "A",
            "b": "B",
            "c": "C",
        })

        # Test either syntax inbound
        configDict["d"] = "D"
        configDict.e = "E"

        # Test either syntax outbound
        for key in "abcde":
            value = key.upper()

            self.assertEquals(configDict[key], value)
            self.assertEquals(configDict.get(key), value)
            self.assertEquals(getattr(configDict, key), value)

            self.assertIn(key, configDict)
            self.assertTrue(hasattr(configDict, key))

        # Test either syntax for delete
        del configDict["d"]
        delattr(configDict, "e")

        # Test either syntax for absence
        for key in "de":
            self.assertNotIn(key, configDict)
            self.assertFalse(hasattr(configDict, key))
            self.assertRaises(KeyError, lambda: configDict[key])
            self.assertRaises(AttributeError, getattr, configDict, key)

        # Keys may not begin with "_" in dict syntax
        def set():
            configDict["_x"] = "X"
        self.assertRaises(KeyError, set)

        # But attr syntax is OK
        configDict._x = "X"
        self.assertEquals(configDict._x, "X")

    def test_mergeData(self):
        """
        Verify we don't lose keys which are present in the old but not
        replaced in the new.
        """
        old = ConfigDict({
            "Serialization" : ConfigDict({
                "FoldLines" : True,
                "FoldLength" : 75,
            }),
            "LogLevels" : ConfigDict({
                "calendarkit.ical" : "debug",
            }),
        })
        new = ConfigDict({
            "Serialization" : ConfigDict({
                "FoldLength" : 60,
            }),
        })
        mergeData(old, new)
        self.assertEquals(old.Serialization.FoldLines, True)
        self.assertEquals(old.Serialization.FoldLength, 60)
        self.assertEquals(old.LogLevels["calendarkit.ical"], "debug")

    def test_mergeDataSectionOverValue(self):
        old = ConfigDict({"DefaultTimezone": ""})
        new = ConfigDict({"DefaultTimezone": {"Name": "UTC"}})
        self.assertRaises(ConfigurationError, mergeData, old, new)

    def test_provider(self):
        provider = PListConfigProvider(DEFAULT_CONFIG)
        provider.getDefaults().ProductID = "changed"

        self.assertEquals(DEFAULT_CONFIG["ProductID"], "-//CALENDARKIT//NONSGML Version 1//EN")
        self.assertEquals(provider.loadConfig(), {})
