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

"""Functions for http(s) interactions."""

import logging

import requests

from eosrucio.util.config import config
from .constants import get_redirector_version

logger = logging.getLogger(__name__)

user_agent = f"eosrucio/{get_redirector_version()}"


def hide_token(headers: dict) -> dict:
    """
    Hide the authorization token in the headers.

    :param headers: copy of headers (dict)
    :return: headers with token hidden (dict).
    """
    if 'Authorization' in headers:
        headers['Authorization'] = 'Bearer ********'

    return headers


def download_file(url: str, timeout: int = config.Registry.timeout, headers: dict = None) -> str:
    """
    Download url content.

    Any transport error or bad http status is logged and an empty string is returned.

    :param url: url (str)
    :param timeout: optional timeout (int)
    :param headers: optional headers (dict)
    :return: url content (str).
    """
    # define the request headers
    if headers is None:
        headers = {"User-Agent": user_agent}
    logger.debug(f"headers = {hide_token(headers.copy())}")

    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()  # Raise an error for bad responses (4xx and 5xx)
        content = response.text
    except requests.exceptions.RequestException as exc:
        logger.warning(f"failed to download {url}: {exc}")
        content = ""

    return content
