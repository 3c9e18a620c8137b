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

"""
Reader for the redirector directives of an xrootd configuration file.

Only lines starting with 'eosrucio.' are considered, e.g.::

    eosrucio.site CERN-PROD
    eosrucio.agis http://atlas-agis-api.cern.ch/request/ddmendpoint/query/list/?json
    eosrucio.jsonfile /etc/eosrucio/sites.json
    eosrucio.overwriteSE /eos/atlas/atlasdatadisk /eos/atlas/atlasscratchdisk
    eosrucio.eoshost eosatlas.cern.ch
    eosrucio.eosport 1094
    eosrucio.uphost atlas-xrd-eu.cern.ch
    eosrucio.upport 1094
"""

import logging
import re

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.util.constants import DIRECTIVE_TAG

logger = logging.getLogger(__name__)
errors = ErrorCodes()

# host names or addresses accepted for the storage and uplink instances
_host_pattern = re.compile(r'^(\[[0-9a-fA-F:.]+\]|[A-Za-z0-9]([A-Za-z0-9.\-_]*[A-Za-z0-9])?)$')


class Directives:
    """Values of the redirector directives."""

    def __init__(self):
        """Set initial values."""
        self.overrides = []  # eosrucio.overwriteSE
        self.site = ""  # eosrucio.site
        self.jsonfile = ""  # eosrucio.jsonfile
        self.agis = ""  # eosrucio.agis
        self.eoshost = ""  # eosrucio.eoshost
        self.eosport = 0  # eosrucio.eosport
        self.uphost = ""  # eosrucio.uphost
        self.upport = 0  # eosrucio.upport

    @property
    def eos_instance(self) -> str:
        return f'{self.eoshost}:{self.eosport}'

    @property
    def uplink_instance(self) -> str:
        return f'{self.uphost}:{self.upport}'

    def __repr__(self) -> str:
        return f'Directives({self.__dict__})'

    def validate(self):
        """
        Verify that the mandatory values are present and valid.

        :raises: ConfigurationFailure for the first problem found.
        """
        if not self.eoshost or not self.eosport:
            raise ConfigurationFailure('EOS redirect instance value missing/invalid, example: '
                                       '"eosrucio.eoshost eosatlas.cern.ch" and "eosrucio.eosport 1094"',
                                       code=errors.INVALIDINSTANCE)
        if not is_valid_host(self.eoshost):
            raise ConfigurationFailure(f'EOS redirect url is not valid: {self.eos_instance}',
                                       code=errors.INVALIDINSTANCE)
        if not self.uphost or not self.upport:
            raise ConfigurationFailure('uplink instance value missing/invalid, example: '
                                       '"eosrucio.uphost atlas-xrd-eu.cern.ch" and "eosrucio.upport 1094"',
                                       code=errors.INVALIDUPLINK)
        if not is_valid_host(self.uphost):
            raise ConfigurationFailure(f'uplink redirect url is not valid: {self.uplink_instance}',
                                       code=errors.INVALIDUPLINK)
        if not self.site:
            raise ConfigurationFailure('mandatory site name value missing, example: "eosrucio.site CERN-EOS"',
                                       code=errors.MISSINGSITENAME)


def is_valid_host(host: str) -> bool:
    """
    Check that the host looks like a host name or a bracketed IPv6 address.

    :param host: host (str)
    :return: True if valid (bool).
    """
    return bool(_host_pattern.match(host))


def parse_port(value: str) -> int:
    """
    Convert a port directive value.

    :param value: raw value (str)
    :return: port, 0 if the value is not a valid port (int).
    """
    try:
        port = int(value)
    except ValueError:
        logger.warning(f'no digits were found when parsing port value {value}')
        return 0

    if not 0 < port < 65536:
        logger.warning(f'port value out of range: {port}')
        return 0

    return port


def parse_directives(lines: list) -> Directives:
    """
    Collect the redirector directives from the lines of a configuration file.

    Unknown eosrucio directives are reported and ignored. Directives without a
    value are reported and leave the setting unchanged.

    :param lines: configuration file lines (list)
    :return: directive values (Directives).
    """
    directives = Directives()
    for line in lines:
        line = line.split('#', 1)[0].strip()
        if not line.startswith(DIRECTIVE_TAG):
            continue

        tokens = line.split()
        name = tokens[0][len(DIRECTIVE_TAG):]
        values = tokens[1:]
        if name == 'overwriteSE':
            directives.overrides.extend(values)
            continue
        if name not in {'site', 'jsonfile', 'agis', 'eoshost', 'eosport', 'uphost', 'upport'}:
            logger.warning(f'ignoring unknown directive {tokens[0]}')
            continue
        if not values:
            logger.warning(f'no value given for directive {tokens[0]}')
            continue

        value = values[0]
        if name in {'eosport', 'upport'}:
            value = parse_port(value)
        setattr(directives, name, value)

    return directives


def read_directives(path: str) -> Directives:
    """
    Read the redirector directives from a configuration file.

    :param path: configuration file name (str)
    :raises: ConfigurationFailure if the file cannot be read
    :return: directive values (Directives).
    """
    if not path:
        raise ConfigurationFailure('no configuration file', code=errors.NOCONFIGFILE)

    try:
        with open(path, 'r', encoding='utf-8') as _file:
            lines = _file.readlines()
    except OSError as exc:
        raise ConfigurationFailure(f'failed to open config file {path}: {exc}', code=errors.NOCONFIGFILE) from exc

    directives = parse_directives(lines)
    logger.info(f'json file: {directives.jsonfile}')
    logger.info(f'AGIS site: {directives.agis}')
    logger.info(f'site: {directives.site}')

    return directives
