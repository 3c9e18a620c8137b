#!/usr/bin/env python
# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

import os
import re
import configparser
from typing import Any

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure

errors = ErrorCodes()

_default_path = os.path.join(os.path.dirname(__file__), 'default.cfg')
_path = os.environ.get('EOSRUCIO_CONFIG', _default_path)
_default_cfg = _path if os.path.exists(_path) else _default_path

# settings that must be positive numbers
_positive_settings = {
    'Translation': ('second_shard_width',),
    'Registry': ('timeout', 'nretry'),
    'Probe': ('timeout', 'max_workers'),
}

# the first two digits of the 32 digit md5 are used by the first shard
MAX_SHARD_WIDTH = 30


class _ConfigurationSection():
    """
    Keep the settings for a section of the configuration file
    """

    def __getitem__(self, item: Any) -> Any:
        return getattr(self, item)

    def __repr__(self) -> str:
        return str(tuple(list(self.__dict__.keys())))

    def __getattr__(self, attr: Any) -> Any:
        if attr in self.__dict__:
            return self.__dict__[attr]
        raise AttributeError(f'setting \"{attr}\" does not exist in the section; __dict__={self.__dict__}')


def convert_value(value: str) -> Any:
    """
    Convert a raw configuration string to a proper type.

    Values starting with $ are replaced with the named environment variable.

    :param value: raw value (str)
    :raises: KeyError for an undefined environment variable
    :return: converted value (Any).
    """
    if value.startswith('$'):
        tmpmatch = re.search(r'\$\{*([^\}]+)\}*', value)
        envname = tmpmatch.group(1)
        if envname not in os.environ:
            raise KeyError(f'{envname} in the cfg is an undefined environment variable')
        value = os.environ.get(envname)
    if value in {'True', 'true'}:
        value = True
    elif value in {'False', 'false'}:
        value = False
    elif value in {'None', 'none'}:
        value = None
    elif re.match(r'^\d+$', value):
        value = int(value)
    elif re.match(r'^\d+\.\d*$', value):
        value = float(value)

    return value


def read(config_file: Any) -> Any:
    """
    Read the settings from file and return a dot notation object

    :param config_file: file
    :return: attribute object.
    """

    _config = configparser.ConfigParser()
    _config.read(config_file)

    obj = _ConfigurationSection()

    for section in _config.sections():

        settings = _ConfigurationSection()
        for key, value in _config.items(section):
            setattr(settings, key, convert_value(value))

        setattr(obj, section, settings)

    return obj


def validate(obj: Any) -> Any:
    """
    Check the numeric settings used by the translation, the registry download and the probe.

    :param obj: attribute object returned by read() (Any)
    :raises: ConfigurationFailure for a missing, non-numeric or non-positive value
    :return: the same object (Any).
    """
    for section, keys in _positive_settings.items():
        settings = getattr(obj, section, None)
        if settings is None:
            raise ConfigurationFailure(f'section [{section}] is missing', code=errors.CONFIGURATIONFAILURE)
        for key in keys:
            value = settings.__dict__.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigurationFailure(f'[{section}] {key} must be a positive number, got {value!r}',
                                           code=errors.CONFIGURATIONFAILURE)

    if obj.Translation.second_shard_width > MAX_SHARD_WIDTH:
        raise ConfigurationFailure(f'[Translation] second_shard_width must not exceed {MAX_SHARD_WIDTH}',
                                   code=errors.CONFIGURATIONFAILURE)

    return obj


config = validate(read(_default_cfg))
