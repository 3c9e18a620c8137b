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
The table of storage endpoints (space tokens) known to the redirector.

Each endpoint is a path prefix with a priority counter. The counter is bumped
every time a file is found below the prefix, so endpoints that serve files
are tried first by later resolutions.

All access goes through the registry methods, which take the internal
reader/writer lock. The lock is never held during a probe.
"""

import logging
from collections import namedtuple
from collections.abc import Callable
from typing import Any

from eosrucio.info.dataloader import DataLoader
from eosrucio.info.sitedata import (
    parse_agis_endpoints,
    parse_local_endpoints
)
from eosrucio.util.config import config
from eosrucio.util.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

EndpointEntry = namedtuple('EndpointEntry', ['prefix', 'priority'])


def normalize_prefix(prefix: str) -> str:
    """
    Make sure the endpoint prefix ends with a slash.

    :param prefix: endpoint prefix (str)
    :return: normalized prefix (str).
    """
    return prefix if prefix.endswith('/') else prefix + '/'


class EndpointRegistry:
    """Thread-safe priority table of endpoint prefixes."""

    def __init__(self):
        """Set initial values."""
        self._lock = ReadWriteLock()
        self._endpoints = {}  # prefix -> priority, in insertion order

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._endpoints)

    def __contains__(self, prefix: str) -> bool:
        with self._lock.read_locked():
            return normalize_prefix(prefix) in self._endpoints

    def add(self, prefix: str, priority: int = 0) -> bool:
        """
        Insert a new endpoint.

        An existing prefix is left untouched.

        :param prefix: endpoint prefix (str)
        :param priority: initial priority (int)
        :return: True if the endpoint was added (bool).
        """
        prefix = normalize_prefix(prefix)
        with self._lock.write_locked():
            if prefix in self._endpoints:
                added = False
            else:
                self._endpoints[prefix] = priority
                added = True

        if not added:
            logger.info(f'entry {prefix} already present')
        return added

    def add_all(self, endpoints: list) -> int:
        """
        Insert a list of (prefix, priority) pairs.

        :param endpoints: list of (prefix, priority) tuples (list)
        :return: number of endpoints added (int).
        """
        return sum(1 for prefix, priority in endpoints if self.add(prefix, priority))

    def get_priority(self, prefix: str) -> int or None:
        """
        Return the current priority of an endpoint.

        :param prefix: endpoint prefix (str)
        :return: priority, None for an unknown prefix (int or None).
        """
        with self._lock.read_locked():
            return self._endpoints.get(normalize_prefix(prefix))

    def snapshot_ordered(self) -> list:
        """
        Return a copy of the table ordered by decreasing priority.

        The copy is taken under the read lock and sorted after releasing it.
        Endpoints with equal priority keep their insertion order, but callers
        should not rely on it.

        :return: list of EndpointEntry (list).
        """
        with self._lock.read_locked():
            entries = [EndpointEntry(prefix, priority) for prefix, priority in self._endpoints.items()]

        return sorted(entries, key=lambda entry: entry.priority, reverse=True)

    def bump_priority(self, prefix: str):
        """
        Increase the priority of an endpoint by one; unknown prefixes are ignored.

        :param prefix: endpoint prefix (str).
        """
        prefix = normalize_prefix(prefix)
        with self._lock.write_locked():
            if prefix in self._endpoints:
                self._endpoints[prefix] += 1

    def bootstrap(self, overrides: list = None, remote_fetch: Callable[[], Any] = None, local_file: str = "",
                  site_name: str = "", default_priority: int = config.Registry.local_default_priority) -> bool:
        """
        Populate the table from the first source that yields endpoints.

        The sources are tried in a fixed order:
          1. the explicit override list, all with priority 0,
          2. the remote site registry (remote_fetch returns the decoded AGIS document),
          3. the local JSON file, all with default_priority.

        Failures of the remote registry (exceptions, bad documents, unknown site)
        only cause the local file to be tried.

        :param overrides: explicit endpoint prefixes (list)
        :param remote_fetch: callable returning the AGIS document (Callable)
        :param local_file: path of the local JSON file (str)
        :param site_name: site name to look up in the registry documents (str)
        :param default_priority: priority of the endpoints read from the local file (int)
        :return: True if the table is not empty (bool).
        """
        if overrides:
            logger.info(f'using {len(overrides)} endpoint(s) from the override list')
            self.add_all([(prefix, 0) for prefix in overrides if prefix])
            return len(self) > 0

        if remote_fetch is not None:
            logger.info('trying to read the endpoints from the AGIS site registry')
            try:
                document = remote_fetch()
            except Exception as exc:  # ignore errors, the local file is tried below
                logger.warning(f'failed to read the AGIS site registry: {exc}')
                document = None
            if document is not None and self.add_all(parse_agis_endpoints(document, site_name)):
                return True
            logger.warning(f'no endpoints for site {site_name} in the AGIS site registry')

        if local_file:
            logger.info(f'trying to read the endpoints from local file {local_file}')
            document = DataLoader.load_json(local_file, nretry=1)
            if document is not None and self.add_all(parse_local_endpoints(document, site_name, default_priority)):
                return True
            logger.warning(f'no endpoints for site {site_name} in local file {local_file}')

        return len(self) > 0

    def dump(self):
        """Log the contents of the table."""
        logger.info('contents of the space tokens map:')
        for entry in self.snapshot_ordered():
            logger.info(f'{entry.prefix} {entry.priority}')
