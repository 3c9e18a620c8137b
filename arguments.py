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

"""Argument parser for the redirector command line interface."""

import argparse
from typing import Any

from eosrucio.util.config import config


def str2bool(var: str) -> bool:
    """
    Convert string to bool.

    Args:
        var (str): String to be converted to bool.

    Returns:
        bool: Converted boolean value.
    """
    if isinstance(var, bool):
        return var

    if var.lower() in {"yes", "true", "t", "y", "1"}:
        ret = True
    elif var.lower() in {"no", "false", "f", "n", "0"}:
        ret = False
    else:
        raise argparse.ArgumentTypeError(f"boolean value expected (var={var})")

    return ret


def positive_float(value: str) -> float:
    """
    Validate a positive number of seconds.

    Args:
        value (str): Value to be converted.

    Returns:
        float: Converted value.

    Raises:
        argparse.ArgumentTypeError: If the value is not a positive number.
    """
    try:
        number = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"number expected (value={value})") from exc
    if number <= 0:
        raise argparse.ArgumentTypeError(f"positive number expected (value={value})")

    return number


def add_main_args(parser: argparse.ArgumentParser) -> None:
    """
    Add main arguments to the argument parser.

    Args:
        parser (argparse.ArgumentParser): The argument parser to which the main arguments will be added.
    """
    parser.add_argument(
        "lfns",
        nargs="*",
        help="Logical file names to locate",
    )
    parser.add_argument(
        "-c", "--config",
        dest="config",
        default="",
        help="xrootd configuration file with the eosrucio directives",
    )
    parser.add_argument(
        "--rucio-path",
        dest="rucio_path",
        action="store_true",
        default=False,
        help="Only print the deterministic Rucio path of each scope:name argument",
    )


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    """
    Add logging related arguments to the argument parser.

    Args:
        parser (argparse.ArgumentParser): The argument parser to which the logging arguments will be added.
    """
    parser.add_argument(
        "--no-log",
        dest="nolog",
        action="store_true",
        default=False,
        help="Do not write the log to file",
    )
    parser.add_argument(
        "--logfile",
        dest="logfile",
        default=config.Redirector.logfile,
        help="Name of the log file",
    )
    parser.add_argument(
        "-d", "--debug",
        dest="debug",
        action="store_true",
        default=False,
        help="Enable debug mode for logging messages",
    )


def add_probe_args(parser: argparse.ArgumentParser) -> None:
    """
    Add probe related arguments to the argument parser.

    Args:
        parser (argparse.ArgumentParser): The argument parser to which the probe arguments will be added.
    """
    parser.add_argument(
        "--probe-timeout",
        dest="probe_timeout",
        type=positive_float,
        default=config.Probe.timeout,
        help="Timeout in seconds for each stat of a candidate PFN",
    )
    parser.add_argument(
        "--parallel",
        dest="parallel",
        type=str2bool,
        default=config.Probe.parallel,
        help="Probe the endpoints concurrently",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="Do not contact the storage instance, only the PFNs given with --reachable exist",
    )
    parser.add_argument(
        "--reachable",
        dest="reachable",
        nargs="*",
        default=[],
        help="PFNs reported as reachable in dry-run mode",
    )


def get_args(argv: list = None) -> Any:
    """
    Return the args from the arg parser.

    Args:
        argv (list): Arguments to parse, default is sys.argv.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(description="Locate Rucio logical file names on a storage instance")

    # Add argument groups
    add_main_args(parser)
    add_logging_args(parser)
    add_probe_args(parser)

    return parser.parse_args(argv)
