# -*- test-case-name: calendarkit.test.test_config -*-
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
    "DEFAULT_CONFIG",
    "PListConfigProvider",
    "config",
    "logLevelPredicate",
    "filteredObserver",
]

import copy
import plistlib
from xml.parsers.expat import ExpatError

from twisted.logger import (
    FilteringLogObserver, InvalidLogLevelError, LogLevel,
    LogLevelFilterPredicate, Logger
)

from calendarkit.config import (
    ConfigDict, ConfigProvider, ConfigurationError, config
)

log = Logger()

DEFAULT_CONFIG = {

    #
    # Output
    #
    "ProductID": "-//CALENDARKIT//NONSGML Version 1//EN",

    "Serialization": {
        "FoldLines": True, # Fold content lines longer than FoldLength
        "FoldLength": 75,  # Octets, including the leading space of continuations
    },

    #
    # Input
    #
    "Parsing": {
        # Nested components that are not allowed in their parent (X-
        # components, a VALARM directly in VCALENDAR, ...) are dropped
        # with a warning unless this is set, in which case they are a
        # StructuralError.
        "StrictComponents": False,
    },

    # TZID used for floating DATE-TIME values; empty leaves them naive
    "DefaultTimezone": "",

    #
    # Logging
    #
    "DefaultLogLevel": "warn",
    "LogLevels": {},
}


# Shared by every observer created via filteredObserver()
logLevelPredicate = LogLevelFilterPredicate(defaultLogLevel=LogLevel.warn)


def filteredObserver(observer):
    """
    Wrap a log observer so that it only sees events allowed by the
    configured log levels.

    @param observer: an L{twisted.logger.ILogObserver} provider
    @return: a L{FilteringLogObserver} wrapping C{observer}
    """
    return FilteringLogObserver(observer, [logLevelPredicate])



class PListConfigProvider(ConfigProvider):
    """
    Reads settings from an XML property list. Keys that are not in the
    defaults are logged and dropped.
    """

    def loadConfig(self, configFile=None):
        if not configFile:
            return ConfigDict()
        return ConfigDict(self._parseConfigFromFile(configFile))


    def _parseConfigFromFile(self, filename):
        try:
            with open(filename, "rb") as f:
                configDict = plistlib.load(f)
        except (IOError, OSError):
            log.error("Configuration file does not exist or is inaccessible: {f}", f=filename)
            raise ConfigurationError("Configuration file does not exist or is inaccessible: %s" % (filename,))
        except (ValueError, ExpatError) as e:
            log.error("Configuration file {f} is not a valid plist: {e}", f=filename, e=e)
            raise ConfigurationError("Invalid configuration in %s" % (filename,))
        return _cleanup(configDict, self._defaults)



def _cleanup(configDict, defaultDict):
    cleanDict = copy.deepcopy(configDict)

    for key in configDict:
        if key not in defaultDict:
            log.error("Ignoring unknown configuration option: {k}", k=key)
            del cleanDict[key]

    return cleanDict



def _updateLogLevels(configDict):
    try:
        levels = [
            (namespace, LogLevel.levelWithName(levelName))
            for namespace, levelName in configDict.get("LogLevels", {}).items()
        ]
        levelName = configDict.get("DefaultLogLevel")
        if levelName:
            levels.insert(0, (None, LogLevel.levelWithName(levelName)))
    except InvalidLogLevelError as e:
        raise ConfigurationError("Invalid log level: %s" % (e.level,))

    logLevelPredicate.clearLogLevels()
    for namespace, level in levels:
        logLevelPredicate.setLogLevelForNamespace(namespace, level)



def _updateSerialization(configDict):
    serialization = configDict.get("Serialization")
    if serialization and serialization.get("FoldLength", 75) < 2:
        raise ConfigurationError(
            "Serialization.FoldLength must be at least 2, not %r"
            % (serialization.FoldLength,)
        )



POST_UPDATE_HOOKS = (
    _updateSerialization,
    _updateLogLevels,
)

config.setProvider(PListConfigProvider(DEFAULT_CONFIG))
config.addPostUpdateHooks(POST_UPDATE_HOOKS)
config.update()
