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

"""Unit tests for the configuration layer."""

import os
import shutil
import tempfile
import unittest

from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.util.config import (
    config,
    convert_value,
    read,
    validate
)
from eosrucio.util.constants import DEFAULT_PROBE_TIMEOUT
from eosrucio.util.processes import get_timeout

errors = ErrorCodes()

SETTINGS = """[Translation]
prefix: /atlas/rucio/
second_shard_width: {width}
leading_slash: False

[Registry]
timeout: 20
nretry: 1

[Probe]
timeout: {timeout}
max_workers: 4
"""


class TestConfig(unittest.TestCase):
    """Unit tests for reading and checking the configuration file."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        """Remove test fixtures."""
        shutil.rmtree(self.tmpdir)

    def write_config(self, width='2', timeout='5') -> str:
        path = os.path.join(self.tmpdir, 'eosrucio.cfg')
        with open(path, 'w', encoding='utf-8') as _file:
            _file.write(SETTINGS.format(width=width, timeout=timeout))
        return path

    def test_default_config(self):
        self.assertEqual(config.Translation.prefix, '/atlas/rucio/')
        self.assertEqual(config.Translation.second_shard_width, 2)
        self.assertIs(config.Translation.leading_slash, False)
        self.assertEqual(config.Registry.local_default_priority, 3)
        self.assertEqual(config.Probe.timeout, 5)

    def test_convert_value(self):
        self.assertIs(convert_value('True'), True)
        self.assertIsNone(convert_value('None'))
        self.assertEqual(convert_value('12'), 12)
        self.assertEqual(convert_value('2.5'), 2.5)
        self.assertEqual(convert_value('xrdfs'), 'xrdfs')

    def test_valid_settings(self):
        settings = validate(read(self.write_config(width='4', timeout='2.5')))

        self.assertEqual(settings.Translation.second_shard_width, 4)
        self.assertEqual(settings.Probe.timeout, 2.5)

    def test_unbounded_probe_timeout(self):
        """A probe timeout of zero or none is refused."""
        for timeout in ('0', 'None', 'soon'):
            with self.subTest(timeout=timeout):
                with self.assertRaises(ConfigurationFailure) as context:
                    validate(read(self.write_config(timeout=timeout)))
                self.assertEqual(context.exception.get_error_code(), errors.CONFIGURATIONFAILURE)

    def test_shard_width(self):
        for width in ('0', '31'):
            with self.subTest(width=width):
                with self.assertRaises(ConfigurationFailure):
                    validate(read(self.write_config(width=width)))

    def test_missing_section(self):
        path = os.path.join(self.tmpdir, 'empty.cfg')
        with open(path, 'w', encoding='utf-8') as _file:
            _file.write('[Redirector]\nlogfile: eosrucio.log\n')

        with self.assertRaises(ConfigurationFailure):
            validate(read(path))


class TestTimeout(unittest.TestCase):
    """Unit tests for the command timeout."""

    def test_get_timeout(self):
        self.assertEqual(get_timeout(2), 2)
        for timeout in (0, None, -3):
            with self.subTest(timeout=timeout):
                self.assertEqual(get_timeout(timeout), DEFAULT_PROBE_TIMEOUT)


if __name__ == '__main__':
    unittest.main()
