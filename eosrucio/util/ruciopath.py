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

"""Translation of Rucio logical file names into hash sharded physical paths."""

import hashlib
import logging

from eosrucio.util.config import config

logger = logging.getLogger(__name__)


def get_rucio_path(scope: str, name: str) -> str:
    """
    Construct Rucio standard path using the scope and the LFN
    """

    s = '%s:%s' % (scope, name)
    hash_hex = hashlib.md5(s.encode('utf-8')).hexdigest()

    paths = scope.split('.') + [hash_hex[0:2], hash_hex[2:4], name]

    return '/'.join(paths)


def extract_scope_and_name(path: str) -> tuple:
    """
    Split the part of a logical name following the namespace prefix into scope and file name.

    The file name follows the last colon if there is one, otherwise the last slash.
    Without any separator the whole remainder is used as both scope and file name.

    >>> extract_scope_and_name('data16_13TeV:AOD.123._0001.pool.root.1')
    ('data16_13TeV', 'AOD.123._0001.pool.root.1')
    >>> extract_scope_and_name('user/jdoe/file.root')
    ('user/jdoe', 'file.root')

    :param path: remainder of the logical name (str)
    :return: scope (str), file name (str).
    """
    separator = ':' if ':' in path else '/'
    if separator not in path:
        return path, path

    scope, _, name = path.rpartition(separator)

    return scope, name


def translate(lfn: str, prefix: str = config.Translation.prefix,
              second_shard_width: int = config.Translation.second_shard_width,
              leading_slash: bool = config.Translation.leading_slash) -> str:
    """
    Translate a logical file name into the partial PFN of the Rucio deterministic layout.

    The partial PFN is rucio/<scope>/<d[0:2]>/<d[2:2+width]>/<name> where d is the md5 hex digest
    of "<scope>:<name>". An empty string is returned for names outside the prefix, or when the
    scope or the file name cannot be extracted.

    :param lfn: logical file name (str)
    :param prefix: namespace prefix handled by the translation (str)
    :param second_shard_width: number of hex digits in the second hash directory (int)
    :param leading_slash: start the partial PFN with a slash (bool)
    :return: partial PFN or empty string (str).
    """
    if not lfn or not lfn.startswith(prefix):
        logger.debug(f'{lfn} is not a Rucio name (prefix={prefix})')
        return ""

    scope, name = extract_scope_and_name(lfn[len(prefix):])
    if not scope or not name:
        logger.warning(f'error extracting scope and/or file name from {lfn}')
        return ""

    scope_file = f'{scope}:{name}'
    md5_string = hashlib.md5(scope_file.encode('utf-8')).hexdigest()
    logger.debug(f'md5 of {scope_file} is {md5_string}')

    pfn = f'rucio/{scope}/{md5_string[0:2]}/{md5_string[2:2 + second_shard_width]}/{name}'
    if leading_slash:
        pfn = '/' + pfn

    return pfn
