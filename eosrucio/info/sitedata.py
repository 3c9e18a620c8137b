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
Extraction of storage endpoint prefixes from site registry documents.

Both the AGIS download and the local JSON file are arrays of site objects::

    [{"rc_site": "CERN-PROD",
      "aprotocols": {"r": [[0, 1, "/eos/atlas/atlasdatadisk/"], ...]}}]

In AGIS each read record is [order, priority, prefix]. The local file only lists the
prefixes, either as the aprotocols value itself or under its "r" key.
"""

import logging
from typing import Any

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import RegistryFailure
from eosrucio.info.dataloader import DataLoader

logger = logging.getLogger(__name__)
errors = ErrorCodes()

SITE_TAG = 'rc_site'
PROTOCOLS_TAG = 'aprotocols'
READ_TAG = 'r'


def fetch_site_registry(url: str, **kwargs: Any) -> list:
    """
    Download and decode the site registry document.

    :param url: registry URL (str)
    :param kwargs: passed on to DataLoader.load_url_data (dict)
    :raises: RegistryFailure if nothing could be downloaded or decoded
    :return: site objects (list).
    """
    document = DataLoader.load_json(url, **kwargs)
    if document is None:
        raise RegistryFailure(f'no usable data from {url}')

    return document


def find_site(document: Any, site_name: str) -> dict or None:
    """
    Return the site object whose rc_site matches the given name.

    :param document: decoded registry document (Any)
    :param site_name: site name (str)
    :return: site object or None (dict or None).
    """
    if not isinstance(document, list):
        logger.warning(f'registry document is not an array of sites (type={type(document).__name__})')
        return None

    for site in document:
        if isinstance(site, dict) and site.get(SITE_TAG) == site_name:
            return site

    logger.warning(f'site {site_name} not found in registry document')
    return None


def get_read_protocols(site: dict) -> list:
    """
    Return the read protocol list of a site object.

    :param site: site object (dict)
    :return: read entries (list).
    """
    protocols = site.get(PROTOCOLS_TAG)
    if isinstance(protocols, dict):
        protocols = protocols.get(READ_TAG)
    if not isinstance(protocols, list):
        logger.warning(f'no {READ_TAG} protocols for site {site.get(SITE_TAG)}')
        return []

    return protocols


def parse_agis_endpoints(document: Any, site_name: str) -> list:
    """
    Extract (prefix, priority) pairs from an AGIS document.

    Records that do not have exactly three elements, or whose priority is not an
    integer, are skipped.

    :param document: decoded AGIS document (Any)
    :param site_name: site name (str)
    :return: list of (prefix, priority) tuples (list).
    """
    site = find_site(document, site_name)
    if site is None:
        return []

    endpoints = []
    for record in get_read_protocols(site):
        if not isinstance(record, list) or len(record) != 3:
            logger.warning(f'{errors.get_error_message(errors.MALFORMEDRECORD)}: {record}')
            continue
        _, priority, prefix = record
        if not isinstance(prefix, str) or not prefix:
            logger.warning(f'invalid prefix in AGIS record: {record}')
            continue
        try:
            priority = int(priority)
        except (TypeError, ValueError):
            logger.warning(f'invalid priority in AGIS record: {record}')
            continue
        endpoints.append((prefix, max(priority, 0)))

    return endpoints


def parse_local_endpoints(document: Any, site_name: str, default_priority: int) -> list:
    """
    Extract (prefix, priority) pairs from a local site file, all with the default priority.

    :param document: decoded local document (Any)
    :param site_name: site name (str)
    :param default_priority: priority given to every prefix (int)
    :return: list of (prefix, priority) tuples (list).
    """
    site = find_site(document, site_name)
    if site is None:
        return []

    endpoints = []
    for prefix in get_read_protocols(site):
        if not isinstance(prefix, str) or not prefix:
            logger.warning(f'invalid prefix in local file: {prefix}')
            continue
        endpoints.append((prefix, default_priority))

    return endpoints
