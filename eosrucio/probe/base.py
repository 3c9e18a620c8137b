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
Base class for the existence checks of candidate PFNs.

A probe answers one question: does the candidate exist on the storage
instance, and is it both readable and writable. Every transport problem is
folded into one of the three outcomes, probes never raise for them.
"""

import logging
import threading

from eosrucio.util.constants import (
    DEFAULT_PROBE_TIMEOUT,
    REACHABLE,
    UNREACHABLE,
    PROBE_ERROR
)

logger = logging.getLogger(__name__)


class ProbeStatus:
    """Possible outcomes of a probe."""

    REACHABLE = REACHABLE
    UNREACHABLE = UNREACHABLE
    ERROR = PROBE_ERROR


class EndpointProbe:
    """Abstract probe."""

    name = 'base'

    def probe(self, candidate_pfn: str, timeout: float = DEFAULT_PROBE_TIMEOUT,
              cancel: threading.Event = None) -> str:
        """
        Check whether the candidate PFN exists and is readable and writable.

        :param candidate_pfn: full physical file name (str)
        :param timeout: maximum time in seconds to spend on the check (float)
        :param cancel: optional event that aborts the check when set (threading.Event)
        :return: one of the ProbeStatus values (str).
        """
        raise NotImplementedError(f'{self.__class__.__name__} does not implement probe()')

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self.name})'


class StaticProbe(EndpointProbe):
    """
    Probe backed by a fixed set of reachable PFNs.

    Used for dry runs, where no storage instance is contacted. The PFNs that
    were asked for are recorded in the probed list.
    """

    name = 'static'

    def __init__(self, reachable: list = None, errors: list = None):
        """
        Set initial values.

        :param reachable: PFNs reported as reachable (list)
        :param errors: PFNs reported as probe errors (list).
        """
        self.reachable = set(reachable or [])
        self.errors = set(errors or [])
        self.probed = []
        self._lock = threading.Lock()

    def probe(self, candidate_pfn: str, timeout: float = DEFAULT_PROBE_TIMEOUT,
              cancel: threading.Event = None) -> str:
        with self._lock:
            self.probed.append(candidate_pfn)
        if cancel is not None and cancel.is_set():
            return ProbeStatus.UNREACHABLE
        if candidate_pfn in self.errors:
            return ProbeStatus.ERROR
        if candidate_pfn in self.reachable:
            return ProbeStatus.REACHABLE

        return ProbeStatus.UNREACHABLE
