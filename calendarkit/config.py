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

"""
Library-wide settings.

The defaults and the file format live in L{calendarkit.stdconfig}, which
installs them into the global L{config} on import.
"""

__all__ = [
    "Config",
    "ConfigDict",
    "ConfigProvider",
    "ConfigurationError",
    "mergeData",
    "config",
]

import copy



class ConfigurationError(RuntimeError):
    """
    Invalid configuration.
    """



class ConfigDict(dict):
    """
    Dictionary whose keys can also be read and written as attributes, so
    that nested settings read as C{config.Serialization.FoldLength}.

    Nested plain dicts are converted on assignment.
    """

    def __init__(self, mapping=None):
        if mapping is not None:
            for key, value in mapping.items():
                self[key] = value


    def __repr__(self):
        return "*" + dict.__repr__(self)


    def __setitem__(self, key, value):
        if key.startswith("_"):
            # Reserved for real attributes
            raise KeyError("Keys may not begin with '_': %s" % (key,))

        if isinstance(value, dict) and not isinstance(value, ConfigDict):
            value = ConfigDict(value)
        dict.__setitem__(self, key, value)


    def __setattr__(self, attr, value):
        if attr.startswith("_"):
            dict.__setattr__(self, attr, value)
        else:
            self[attr] = value


    def __getattr__(self, attr):
        if not attr.startswith("_") and attr in self:
            return self[attr]
        return dict.__getattribute__(self, attr)


    def __delattr__(self, attr):
        if not attr.startswith("_") and attr in self:
            del self[attr]
        else:
            dict.__delattr__(self, attr)



class ConfigProvider(object):
    """
    Source of settings: a private copy of the defaults, and whatever a
    subclass can read from a file.
    """

    def __init__(self, defaults=None):
        self._defaults = ConfigDict(copy.deepcopy(defaults or {}))


    def getDefaults(self):
        return self._defaults


    def loadConfig(self, configFile=None):
        """
        Read settings to merge over the defaults.

        @param configFile: the file to read, or C{None}
        @return: a L{ConfigDict}
        @raise ConfigurationError: if C{configFile} cannot be used
        """
        return ConfigDict()



class Config(object):
    """
    Settings read (and, in tests, written) as attributes.

    L{update} merges new values into a copy of the current settings and
    runs the post-update hooks on that copy. The copy replaces the current
    settings only when every hook accepts it, so a rejected update changes
    nothing.
    """

    def __init__(self, provider=None):
        self.__dict__["_provider"] = provider or ConfigProvider()
        self.__dict__["_postUpdateHooks"] = []
        self.reset()


    def __getattr__(self, attr):
        data = self.__dict__.get("_data", {})
        if attr in data:
            return data[attr]
        raise AttributeError(attr)


    def __setattr__(self, attr, value):
        if attr.startswith("_"):
            self.__dict__[attr] = value
        else:
            self._data[attr] = value


    def __str__(self):
        return str(self._data)


    def addPostUpdateHooks(self, hooks):
        """
        @param hooks: callables taking the merged L{ConfigDict}; they may
            raise L{ConfigurationError} to reject it
        """
        self._postUpdateHooks.extend(hooks)


    def setProvider(self, provider):
        self._provider = provider
        self.reset()


    def reset(self):
        """
        Go back to the provider's defaults. Hooks are not run until the
        next L{update}.
        """
        self._data = ConfigDict(copy.deepcopy(self._provider.getDefaults()))


    def update(self, items=None):
        data = copy.deepcopy(self._data)
        mergeData(data, ConfigDict(items))
        for hook in self._postUpdateHooks:
            hook(data)
        self._data = data


    def load(self, configFile):
        """
        Merge the settings in C{configFile} over the current ones.

        @raise ConfigurationError: if the file cannot be read or its
            settings are rejected
        """
        self.update(self._provider.loadConfig(configFile))



def mergeData(oldData, newData):
    """
    Merge C{newData} into C{oldData} recursively: nested dicts are merged
    key by key, anything else replaces the old value.

    @type oldData: L{ConfigDict}
    @type newData: L{ConfigDict}
    """
    for key, value in newData.items():
        if isinstance(value, dict):
            if key not in oldData:
                oldData[key] = {}
            elif not isinstance(oldData[key], ConfigDict):
                raise ConfigurationError(
                    "Cannot merge section %s over a plain value" % (key,)
                )
            mergeData(oldData[key], value)
        else:
            oldData[key] = value



config = Config()
