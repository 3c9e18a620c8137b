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
Base loader class to retrieve data from external sources (file, url).
"""

import json
import logging
import os
import time
from typing import Any

from eosrucio.util.config import config
from eosrucio.util.https import download_file

logger = logging.getLogger(__name__)


class DataLoader:
    """Base data loader."""

    @classmethod
    def readfile(cls, path: str) -> str:
        """
        Read file content.

        :param path: file name (str)
        :return: file content, empty string if the file cannot be read (str).
        """
        if not os.path.isfile(path):
            logger.warning(f"file {path} does not exist")
            return ""

        try:
            with open(path, "r", encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"failed to read file {path}: {exc}")
            content = ""

        return content

    @classmethod
    def load_url_data(cls, url: str, nretry: int = config.Registry.nretry,
                      sleep_time: int = config.Registry.sleep_time, timeout: int = config.Registry.timeout) -> str:
        """
        Download data from url or file resource.

        A url without a scheme is treated as a local file name.

        :param url: URL to source of data (str)
        :param nretry: number of attempts (int)
        :param sleep_time: sleep time in seconds between attempts (int)
        :param timeout: download timeout in seconds (int)
        :return: data loaded from the url or file content, empty string on failure (str).
        """
        content = ""
        if not url:
            return content

        nretry = max(nretry or 1, 1)
        native_access = '://' not in url
        for trial in range(1, nretry + 1):
            if native_access:
                logger.info(f'[attempt={trial}/{nretry}] loading data from file {url}')
                content = cls.readfile(url)
            else:
                logger.info(f'[attempt={trial}/{nretry}] loading data from url {url}')
                content = download_file(url, timeout=timeout)

            if isinstance(content, bytes):
                content = content.decode("utf-8")
            if content:
                logger.info(f'loaded data from \"{url}\" resource, length={len(content) / 1024.:.1f} kB')
                break

            if trial < nretry:
                logger.info(f"will try again after {sleep_time} s..")
                time.sleep(sleep_time)

        return content

    @classmethod
    def load_json(cls, url: str, **kwargs: Any) -> Any:
        """
        Load and decode a JSON document from url or file resource.

        :param url: URL or file name (str)
        :param kwargs: passed on to load_url_data (dict)
        :return: decoded document, None if nothing could be loaded or parsed (Any).
        """
        content = cls.load_url_data(url, **kwargs)
        if not content:
            return None

        try:
            data = json.loads(content)
        except ValueError as exc:
            logger.warning(f"error while parsing the JSON document from {url}: {exc}")
            data = None

        return data
