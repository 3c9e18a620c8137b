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

"""Execution of external commands with a bounded run time."""

import logging
import os
import subprocess
import threading
from signal import SIGKILL

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.util.constants import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)
errors = ErrorCodes()

# interval in seconds between checks of the cancel event while a command runs
POLL_INTERVAL = 0.1


def get_timeout(requested_timeout: float) -> float:
    """
    Define the timeout to be used with subprocess.communicate().

    A missing or non-positive timeout is replaced by the default stat timeout.

    :param requested_timeout: timeout in seconds set by execute() caller (float)
    :return: timeout in seconds (float).
    """
    if not requested_timeout or requested_timeout <= 0:
        logger.warning(f"invalid timeout {requested_timeout}, using {DEFAULT_PROBE_TIMEOUT} s")
        return DEFAULT_PROBE_TIMEOUT

    return requested_timeout


def killpg(pid: int, sig: int = SIGKILL):
    """
    Kill given process group with given signal.

    :param pid: process group id (int)
    :param sig: signal (int)
    """
    try:
        os.killpg(pid, sig)
    except (ProcessLookupError, PermissionError) as error:
        logger.debug(f"failed to execute killpg(): {error}")


def kill_all(process: subprocess.Popen, stderr: str) -> str:
    """
    Kill the process and its process group and collect what is left of its output.

    :param process: process object (subprocess.Popen)
    :param stderr: stderr (str)
    :return: stderr (str).
    """
    killpg(process.pid)
    try:
        _, _stderr = process.communicate(timeout=5)
    except subprocess.TimeoutExpired as exc:
        stderr += f'\n(kill_all) process did not terminate: {exc}'
    else:
        if _stderr:
            stderr += f'\n{_stderr}'

    return stderr


def execute(command: list, timeout: float = None, cancel: threading.Event = None) -> tuple:
    """
    Execute the command and wait for it at most timeout seconds.

    The command runs in its own session so the whole process group can be killed
    on time-out or when the cancel event is set.

    :param command: command and arguments (list)
    :param timeout: time-out in seconds (float)
    :param cancel: optional event that aborts the command when set (threading.Event)
    :return: exit code (int), stdout (str), stderr (str).
    """
    logger.debug(f'executing command: {" ".join(command)}')
    timeout = get_timeout(timeout)

    try:
        process = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
            encoding='utf-8',
            errors='replace'
        )
    except OSError as exc:
        logger.warning(f'failed to execute {command[0]}: {exc}')
        return errors.GENERALERROR, "", str(exc)

    waited = 0.0
    while True:
        interval = min(POLL_INTERVAL, timeout - waited) if cancel is not None else timeout - waited
        try:
            stdout, stderr = process.communicate(timeout=max(interval, 0))
            break
        except subprocess.TimeoutExpired:
            waited += interval
            if cancel is not None and cancel.is_set():
                stderr = kill_all(process, 'command cancelled')
                return errors.PROBECANCELLED, "", stderr
            if waited >= timeout:
                stderr = kill_all(process, f'command timed out after {timeout} s')
                logger.warning(stderr)
                return errors.COMMANDTIMEDOUT, "", stderr

    exit_code = process.returncode
    if stdout and stdout.endswith('\n'):
        stdout = stdout[:-1]

    return exit_code, stdout, stderr
