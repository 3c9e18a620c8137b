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
Resolution of Rucio logical file names into physical file names on a ranked endpoint.

The resolver translates the LFN, takes an ordered snapshot of the endpoint
registry and probes the candidates in decreasing priority. The first
reachable candidate wins and its endpoint priority is bumped.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.info.endpointregistry import EndpointRegistry
from eosrucio.probe.base import (
    EndpointProbe,
    ProbeStatus
)
from eosrucio.util.config import config
from eosrucio.util.constants import (
    RESOLVED,
    NOT_APPLICABLE,
    NOT_FOUND,
    CANCELLED
)
from eosrucio.util.ruciopath import translate

logger = logging.getLogger(__name__)
errors = ErrorCodes()


class Resolution:
    """Outcome of a single resolution."""

    def __init__(self, status: str, endpoint_prefix: str = "", pfn: str = ""):
        """
        Set initial values.

        :param status: RESOLVED, NOT_APPLICABLE, NOT_FOUND or CANCELLED (str)
        :param endpoint_prefix: prefix of the winning endpoint (str)
        :param pfn: full physical file name (str).
        """
        self.status = status
        self.endpoint_prefix = endpoint_prefix
        self.pfn = pfn

    @property
    def resolved(self) -> bool:
        return self.status == RESOLVED

    def __eq__(self, other):
        if not isinstance(other, Resolution):
            return NotImplemented
        return (self.status, self.endpoint_prefix, self.pfn) == (other.status, other.endpoint_prefix, other.pfn)

    def __repr__(self) -> str:
        return f'Resolution(status={self.status}, endpoint_prefix={self.endpoint_prefix}, pfn={self.pfn})'


class Resolver:
    """Resolve logical file names against an endpoint registry."""

    def __init__(self, registry: EndpointRegistry, probe: EndpointProbe,
                 prefix: str = config.Translation.prefix,
                 second_shard_width: int = config.Translation.second_shard_width,
                 leading_slash: bool = config.Translation.leading_slash,
                 probe_timeout: float = config.Probe.timeout,
                 parallel: bool = config.Probe.parallel,
                 max_workers: int = config.Probe.max_workers):
        """
        Set initial values.

        A probe timeout that is not a positive number is rejected.

        :param registry: endpoint registry shared by all resolutions (EndpointRegistry)
        :param probe: probe used to check candidates (EndpointProbe)
        :param prefix: namespace prefix of translatable names (str)
        :param second_shard_width: number of hex digits in the second hash directory (int)
        :param leading_slash: start the partial PFN with a slash (bool)
        :param probe_timeout: timeout in seconds for each probe (float)
        :param parallel: probe all candidates concurrently (bool)
        :param max_workers: maximum number of concurrent probes per resolution (int)
        :raises: ConfigurationFailure for an invalid probe timeout.
        """
        if isinstance(probe_timeout, bool) or not isinstance(probe_timeout, (int, float)) or probe_timeout <= 0:
            raise ConfigurationFailure(f'probe timeout must be a positive number, got {probe_timeout!r}',
                                       code=errors.CONFIGURATIONFAILURE)

        self.registry = registry
        self.probe = probe
        self.prefix = prefix
        self.second_shard_width = second_shard_width
        self.leading_slash = leading_slash
        self.probe_timeout = probe_timeout
        self.parallel = parallel
        self.max_workers = max(max_workers or 1, 1)

    def translate(self, lfn: str) -> str:
        """
        Translate the LFN into a partial PFN with the settings of this resolver.

        :param lfn: logical file name (str)
        :return: partial PFN or empty string (str).
        """
        return translate(lfn, prefix=self.prefix, second_shard_width=self.second_shard_width,
                         leading_slash=self.leading_slash)

    def resolve(self, lfn: str, cancel: threading.Event = None) -> Resolution:
        """
        Find a reachable physical file name for the LFN.

        :param lfn: logical file name (str)
        :param cancel: optional event that aborts the resolution when set (threading.Event)
        :return: outcome of the resolution (Resolution).
        """
        partial = self.translate(lfn)
        if not partial:
            return Resolution(NOT_APPLICABLE)

        if cancel is not None and cancel.is_set():
            logger.info('resolution cancelled')
            return Resolution(CANCELLED)

        ordered = self.registry.snapshot_ordered()
        candidates = [(entry, entry.prefix + partial) for entry in ordered]
        if self.parallel and len(candidates) > 1:
            resolution = self._probe_parallel(candidates, cancel)
        else:
            resolution = self._probe_sequential(candidates, cancel)
        if resolution.status == NOT_FOUND and cancel is not None and cancel.is_set():
            resolution = Resolution(CANCELLED)

        if resolution.resolved:
            self.registry.bump_priority(resolution.endpoint_prefix)
        elif resolution.status == NOT_FOUND:
            logger.info(f'no reachable pfn for lfn={lfn} on {len(candidates)} endpoint(s)')

        return resolution

    def _safe_probe(self, candidate: str, cancel: threading.Event) -> str:
        """
        Run the probe, turning unexpected exceptions into a probe error.

        :param candidate: full physical file name (str)
        :param cancel: cancel event (threading.Event)
        :return: probe status (str).
        """
        try:
            return self.probe.probe(candidate, timeout=self.probe_timeout, cancel=cancel)
        except Exception as exc:
            logger.warning(f'exception caught while probing {candidate}: {exc}')
            return ProbeStatus.ERROR

    def _probe_sequential(self, candidates: list, cancel: threading.Event) -> Resolution:
        for entry, candidate in candidates:
            if cancel is not None and cancel.is_set():
                logger.info('resolution cancelled')
                return Resolution(CANCELLED)

            logger.info(f'check in path: {entry.prefix} with priority: {entry.priority}')
            status = self._safe_probe(candidate, cancel)
            if status == ProbeStatus.REACHABLE:
                return Resolution(RESOLVED, entry.prefix, candidate)

        return Resolution(NOT_FOUND)

    def _probe_parallel(self, candidates: list, cancel: threading.Event) -> Resolution:
        """
        Probe all candidates concurrently and return the highest priority reachable one.

        Results are consumed in priority order; once a winner is known the
        outstanding probes are cancelled.
        """
        abort = threading.Event()
        watcher = None
        if cancel is not None:
            # propagate the caller's cancellation to the probes
            def _watch():
                while not abort.is_set():
                    if cancel.wait(0.1):
                        abort.set()

            watcher = threading.Thread(target=_watch, name='cancel-watcher', daemon=True)
            watcher.start()

        resolution = Resolution(NOT_FOUND)
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(candidates)))
        try:
            futures = [(entry, candidate, executor.submit(self._safe_probe, candidate, abort))
                       for entry, candidate in candidates]
            for entry, candidate, future in futures:
                status = future.result()
                if status == ProbeStatus.REACHABLE:
                    resolution = Resolution(RESOLVED, entry.prefix, candidate)
                    break
                if cancel is not None and cancel.is_set():
                    logger.info('resolution cancelled')
                    resolution = Resolution(CANCELLED)
                    break
        finally:
            abort.set()
            executor.shutdown(wait=True, cancel_futures=True)
            if watcher is not None:
                watcher.join()

        return resolution
