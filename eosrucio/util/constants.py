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

# Redirector version (keep in sync with REDIRECTORVERSION)
RELEASE = '1'   # major release number
VERSION = '0'   # increased for bigger updates
REVISION = '0'  # reset to '0' for every new version release, increased for small updates

SUCCESS = 0
FAILURE = 1

# Resolution outcomes
RESOLVED = 'RESOLVED'
NOT_APPLICABLE = 'NOT_APPLICABLE'
NOT_FOUND = 'NOT_FOUND'
CANCELLED = 'CANCELLED'

# Probe outcomes
REACHABLE = 'REACHABLE'
UNREACHABLE = 'UNREACHABLE'
PROBE_ERROR = 'ERROR'

# Default timeout in seconds for a single stat of a candidate PFN
DEFAULT_PROBE_TIMEOUT = 5

# Prefix of the redirector directives in the xrootd configuration file
DIRECTIVE_TAG = 'eosrucio.'


def get_redirector_version() -> str:
    """
    Return the current redirector version string with the format <release>.<version>.<revision>.

    :return: version string.
    """

    return f'{RELEASE}.{VERSION}.{REVISION}'
