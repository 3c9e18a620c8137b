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

# This module contains functions related to logging.

import logging
import sys
from time import gmtime
from eosrucio.util.config import config

logger = logging.getLogger(__name__)


def establish_logging(debug: bool = True, nolog: bool = False, filename: str = config.Redirector.logfile):
    """
    Setup and establish logging.

    Messages go to stdout and, unless nolog is set, also to the given log file.
    Timestamps are in UTC.

    :param debug: debug mode (Boolean),
    :param nolog: True when no log file should be written (Boolean).
    :param filename: name of log file (string).
    """

    _logger = logging.getLogger('')
    _logger.handlers = []
    _logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.name = 'stream_handler'
    if debug:
        format_str = '%(asctime)s | %(levelname)-8s | %(name)-32s | %(funcName)-25s | %(message)s'
        level = logging.DEBUG
    else:
        format_str = '%(asctime)s | %(levelname)-8s | %(message)s'
        level = logging.INFO
    if not nolog:
        logging.basicConfig(filename=filename, level=level, format=format_str, filemode='w')
    _logger.setLevel(level)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(format_str))
    logging.Formatter.converter = gmtime
    _logger.addHandler(console)


def flush_handler(name: str = ""):
    """
    Flush the stdout buffer for the given handler.

    :param name: name of handler (string)
    """

    if not name:
        return
    for handler in logging.getLogger().handlers:
        if handler.name == name:
            handler.flush()  # make sure that stdout buffer gets flushed
