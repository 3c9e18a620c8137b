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
Redirect decisions for a storage front-end serving Rucio logical file names.

The redirector owns the endpoint registry and the resolver. For every located
path it sends the client to the storage instance when a reachable PFN exists,
and to the uplink (meta-manager) otherwise.
"""

import logging
import threading
from functools import partial

from eosrucio.api.resolver import Resolver
from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.info.endpointregistry import EndpointRegistry
from eosrucio.info.sitedata import fetch_site_registry
from eosrucio.probe.base import EndpointProbe
from eosrucio.probe.xrdfs import XrdfsProbe
from eosrucio.util.config import config
from eosrucio.util.directives import Directives

logger = logging.getLogger(__name__)
errors = ErrorCodes()


class Redirect:
    """Answer to a locate request."""

    REDIRECT = 'redirect'
    OK = 'ok'

    def __init__(self, kind: str, host: str = "", port: int = 0, opaque: str = ""):
        """
        Set initial values.

        :param kind: REDIRECT or OK (str)
        :param host: host the client is sent to (str)
        :param port: port the client is sent to (int)
        :param opaque: opaque information appended to the redirect (str).
        """
        self.kind = kind
        self.host = host
        self.port = port
        self.opaque = opaque

    @property
    def url(self) -> str:
        if self.kind != Redirect.REDIRECT:
            return ""
        url = f'root://{self.host}:{self.port}/'
        return f'{url}?{self.opaque}' if self.opaque else url

    def __eq__(self, other):
        if not isinstance(other, Redirect):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __repr__(self) -> str:
        return f'Redirect(kind={self.kind}, host={self.host}, port={self.port}, opaque={self.opaque})'


class RucioRedirector:
    """Locate Rucio logical file names on the storage instance."""

    def __init__(self, directives: Directives, resolver: Resolver,
                 namespace_root: str = config.Redirector.namespace_root,
                 lfn_opaque: str = config.Redirector.lfn_opaque):
        """
        Set initial values.

        :param directives: validated directive values (Directives)
        :param resolver: resolver of logical file names (Resolver)
        :param namespace_root: path answered locally when it cannot be resolved (str)
        :param lfn_opaque: opaque template of the storage redirect, {pfn} is replaced (str).
        """
        self.directives = directives
        self.resolver = resolver
        self.namespace_root = namespace_root
        self.lfn_opaque = lfn_opaque

    @classmethod
    def from_config(cls, directives: Directives, probe: EndpointProbe = None,
                    registry: EndpointRegistry = None) -> 'RucioRedirector':
        """
        Validate the directives, populate the endpoint registry and build the redirector.

        :param directives: directive values (Directives)
        :param probe: probe to use, default is xrdfs stat against the storage instance (EndpointProbe)
        :param registry: registry to populate, default is a new one (EndpointRegistry)
        :raises: ConfigurationFailure when the redirector cannot serve
        :return: redirector (RucioRedirector).
        """
        directives.validate()

        if registry is None:
            registry = EndpointRegistry()
        if len(registry) == 0:
            remote_fetch = partial(fetch_site_registry, directives.agis) if directives.agis else None
            if not (directives.overrides or remote_fetch or directives.jsonfile):
                raise ConfigurationFailure('no resource (overwriteSE, AGIS site or local JSON file) from which '
                                           'to read the space tokens is available', code=errors.EMPTYREGISTRY)
            registry.bootstrap(overrides=directives.overrides, remote_fetch=remote_fetch,
                               local_file=directives.jsonfile, site_name=directives.site)
        if len(registry) == 0:
            raise ConfigurationFailure('the Rucio space token map is empty', code=errors.EMPTYREGISTRY)
        registry.dump()

        if probe is None:
            probe = XrdfsProbe(directives.eos_instance)

        return cls(directives, Resolver(registry, probe))

    def locate(self, path: str, tident: str = 'unknown', cancel: threading.Event = None) -> Redirect:
        """
        Decide where the client asking for path should go.

        :param path: logical file name requested by the client (str)
        :param tident: client trace identifier, only used for logging (str)
        :param cancel: optional event that aborts the resolution when set (threading.Event)
        :return: redirect decision (Redirect).
        """
        resolution = self.resolver.resolve(path, cancel=cancel)
        if resolution.resolved:
            return Redirect(Redirect.REDIRECT, self.directives.eoshost, self.directives.eosport,
                            self.lfn_opaque.format(pfn=resolution.pfn))

        if path == self.namespace_root:
            logger.info(f'{tident}: for "{self.namespace_root}" we return OK')
            return Redirect(Redirect.OK)

        logger.info(f'{tident}: pfn not found ({resolution.status}), redirect to uplink manager for lfn={path}')
        return Redirect(Redirect.REDIRECT, self.directives.uphost, self.directives.upport)

    def space(self, path: str) -> int:
        """
        Space requests are not handled by the redirector.

        :param path: path (str)
        :return: 0 (int).
        """
        return 0
