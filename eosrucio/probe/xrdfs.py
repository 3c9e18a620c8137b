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

"""Stat probe based on the xrdfs command line client."""

import logging
import re
import threading

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.util.config import config
from eosrucio.util.constants import DEFAULT_PROBE_TIMEOUT
from eosrucio.util.processes import execute
from .base import (
    EndpointProbe,
    ProbeStatus
)

logger = logging.getLogger(__name__)
errors = ErrorCodes()

# stat flags that must all be set for a file to be usable
required_flags = ('IsReadable', 'IsWritable')


def get_stat_flags(output: str) -> set:
    """
    Extract the flag names from the output of xrdfs stat.

    Example of the relevant line: 'Flags:    48 (IsReadable|IsWritable)'

    :param output: stdout of xrdfs stat (str)
    :return: flag names (set).
    """
    match = re.search(r'^Flags:\s+\d+\s*\(([^)]*)\)', output, re.MULTILINE)
    if not match:
        return set()

    return {flag.strip() for flag in match.group(1).split('|') if flag.strip()}


class XrdfsProbe(EndpointProbe):
    """Stat the candidate PFN on the storage instance with 'xrdfs <instance> stat <pfn>'."""

    name = 'xrdfs'

    def __init__(self, instance: str, command: str = config.Probe.command):
        """
        Set initial values.

        :param instance: storage instance as host:port (str)
        :param command: xrdfs executable (str).
        """
        self.instance = instance
        self.command = command

    def get_command(self, candidate_pfn: str) -> list:
        """
        Return the stat command for the candidate.

        :param candidate_pfn: full physical file name (str)
        :return: command and arguments (list).
        """
        return [self.command, self.instance, 'stat', candidate_pfn]

    def probe(self, candidate_pfn: str, timeout: float = DEFAULT_PROBE_TIMEOUT,
              cancel: threading.Event = None) -> str:
        exit_code, stdout, stderr = execute(self.get_command(candidate_pfn), timeout=timeout, cancel=cancel)
        if exit_code == errors.PROBECANCELLED:
            logger.info(f'stat of {candidate_pfn} cancelled')
            return ProbeStatus.UNREACHABLE
        if exit_code == errors.COMMANDTIMEDOUT:
            logger.warning(f'{errors.get_error_message(errors.PROBETIMEOUT)}: {candidate_pfn} (timeout={timeout} s)')
            return ProbeStatus.ERROR
        if exit_code == errors.GENERALERROR:
            logger.warning(f'{errors.get_error_message(errors.PROBEFAILURE)}: {candidate_pfn} ({stderr})')
            return ProbeStatus.ERROR
        if exit_code != 0:
            logger.debug(f'stat of {candidate_pfn} failed (exit code {exit_code}): {stderr}')
            return ProbeStatus.UNREACHABLE

        logger.info(f'stat successful for pfn: {candidate_pfn}')
        flags = get_stat_flags(stdout)
        if all(flag in flags for flag in required_flags):
            return ProbeStatus.REACHABLE

        logger.info(f'{candidate_pfn} exists but is not readable and writable (flags={sorted(flags)})')
        return ProbeStatus.UNREACHABLE
