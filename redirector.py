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

"""Command line front-end: locate Rucio logical file names and print the redirect decisions."""

import logging
import signal
import sys
import threading
from typing import Any

from arguments import get_args
from eosrucio.api.redirector import RucioRedirector
from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.probe.base import StaticProbe
from eosrucio.util.constants import (
    SUCCESS,
    FAILURE,
    get_redirector_version
)
from eosrucio.util.directives import read_directives
from eosrucio.util.loggingsupport import (
    establish_logging,
    flush_handler
)
from eosrucio.util.ruciopath import get_rucio_path


def print_rucio_paths(names: list) -> int:
    """
    Print the deterministic Rucio path of each scope:name argument.

    :param names: scope:name strings (list)
    :return: exit code (int).
    """
    exit_code = SUCCESS
    for did in names:
        scope, _, name = did.rpartition(':')
        if not scope or not name:
            logging.error(f'{did} is not of the form scope:name')
            exit_code = FAILURE
            continue
        print(f'{did} {get_rucio_path(scope, name)}')

    return exit_code


def main(args: Any, cancel: threading.Event) -> int:
    """
    Configure the redirector and locate the requested logical file names.

    :param args: parsed arguments (argparse.Namespace)
    :param cancel: event set when the process is asked to stop (threading.Event)
    :return: exit code (int).
    """
    logger = logging.getLogger(__name__)
    logger.info(f'eosrucio redirector version {get_redirector_version()}')

    if args.rucio_path:
        return print_rucio_paths(args.lfns)

    probe = StaticProbe(args.reachable) if args.dry_run else None
    try:
        directives = read_directives(args.config)
        redirector = RucioRedirector.from_config(directives, probe=probe)
    except ConfigurationFailure as error:
        code = error.get_error_code()
        logger.fatal(f'{ErrorCodes.get_error_name(code)}: {error.get_last_error()}')
        logger.debug(error.get_detail())
        return code % 256 or FAILURE

    redirector.resolver.probe_timeout = args.probe_timeout
    redirector.resolver.parallel = args.parallel

    for lfn in args.lfns:
        if cancel.is_set():
            logger.warning('stop requested, remaining names are not located')
            break
        redirect = redirector.locate(lfn, tident='cli', cancel=cancel)
        flush_handler('stream_handler')
        print(f'{lfn} {redirect.kind} {redirect.url}'.rstrip())

    return SUCCESS


def interrupt(cancel: threading.Event, signum: int, frame: Any):
    """
    Signal handler: ask the running resolution to stop.

    :param cancel: event shared with the resolutions (threading.Event)
    :param signum: signal number (int)
    :param frame: stack frame (Any).
    """
    logging.warning(f'caught signal {signal.Signals(signum).name}, cancelling')
    cancel.set()


if __name__ == "__main__":
    # get the args from the arg parser
    args = get_args()

    # setup and establish standard logging
    establish_logging(debug=args.debug, nolog=args.nolog, filename=args.logfile)

    stop_event = threading.Event()
    signal.signal(signal.SIGINT, lambda signum, frame: interrupt(stop_event, signum, frame))
    signal.signal(signal.SIGTERM, lambda signum, frame: interrupt(stop_event, signum, frame))

    # execute main function
    exit_code = main(args, stop_event)
    logging.shutdown()

    sys.exit(exit_code)
