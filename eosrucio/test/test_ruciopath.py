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

"""Unit tests for the LFN to PFN translation."""

import contextlib
import hashlib
import io
import unittest

from eosrucio.util.constants import FAILURE
from eosrucio.util.ruciopath import (
    extract_scope_and_name,
    get_rucio_path,
    translate
)
from redirector import print_rucio_paths


class TestTranslate(unittest.TestCase):
    """Unit tests for translate()."""

    def test_colon_form(self):
        """Make sure that scope:name is translated into the hash sharded path."""
        self.assertEqual(translate('/atlas/rucio/data:myfile.root'), 'rucio/data/88/04/myfile.root')

    def test_slash_form(self):
        """Without a colon the file name follows the last slash."""
        self.assertEqual(translate('/atlas/rucio/user/jdoe/f.root'), 'rucio/user/jdoe/47/89/f.root')

    def test_last_colon_wins(self):
        self.assertEqual(translate('/atlas/rucio/a:b:c.root'), 'rucio/a:b/ba/3c/c.root')

    def test_deterministic(self):
        """Identical input always gives the identical output."""
        lfn = '/atlas/rucio/data16_13TeV:AOD.123._0001.pool.root.1'
        results = {translate(lfn) for _ in range(10)}

        self.assertEqual(len(results), 1)
        self.assertEqual(results.pop(), 'rucio/data16_13TeV/fe/a8/AOD.123._0001.pool.root.1')

    def test_shard_bounds(self):
        """The shard directories are the leading hex digits of md5(scope:name)."""
        for scope, name in (('data', 'myfile.root'), ('mc16_13TeV', 'EVNT.01._000001.pool.root.1'), ('x', 'y')):
            digest = hashlib.md5(f'{scope}:{name}'.encode('utf-8')).hexdigest()
            for width in (2, 4):
                with self.subTest(scope=scope, name=name, width=width):
                    pfn = translate(f'/atlas/rucio/{scope}:{name}', second_shard_width=width)
                    parts = pfn.split('/')
                    self.assertEqual(parts[0], 'rucio')
                    self.assertEqual(parts[2], digest[0:2])
                    self.assertEqual(parts[3], digest[2:2 + width])
                    self.assertEqual(len(parts[3]), width)
                    self.assertEqual(parts[-1], name)

    def test_legacy_layout(self):
        """Four digit second shard with a leading slash."""
        pfn = translate('/atlas/rucio/data:myfile.root', second_shard_width=4, leading_slash=True)

        self.assertEqual(pfn, '/rucio/data/88/04cd/myfile.root')

    def test_prefix_gating(self):
        """Names outside the namespace prefix are not translated."""
        for lfn in ('/eos/atlas/data:myfile.root', '/atlas/data:myfile.root', 'atlas/rucio/data:f', '', '/atlas/rucio'):
            with self.subTest(lfn=lfn):
                self.assertEqual(translate(lfn), '')

    def test_no_separator(self):
        """A remainder without separator is both the scope and the file name."""
        self.assertEqual(translate('/atlas/rucio/file.root'), 'rucio/file.root/2c/38/file.root')

    def test_custom_prefix(self):
        self.assertEqual(translate('/cms/rucio/data:myfile.root', prefix='/cms/rucio/'), 'rucio/data/88/04/myfile.root')
        self.assertEqual(translate('/atlas/rucio/data:myfile.root', prefix='/cms/rucio/'), '')

    def test_empty_scope_or_name(self):
        """Missing scope or file name makes the name untranslatable."""
        for lfn in ('/atlas/rucio/:myfile.root', '/atlas/rucio/data:', '/atlas/rucio/data/', '/atlas/rucio/'):
            with self.subTest(lfn=lfn):
                self.assertEqual(translate(lfn), '')


class TestRucioPath(unittest.TestCase):
    """Unit tests for the helpers."""

    def test_extract_scope_and_name(self):
        self.assertEqual(extract_scope_and_name('data:f.root'), ('data', 'f.root'))
        self.assertEqual(extract_scope_and_name('user/jdoe/f.root'), ('user/jdoe', 'f.root'))
        self.assertEqual(extract_scope_and_name('f.root'), ('f.root', 'f.root'))

    def test_get_rucio_path(self):
        """Dots in the scope become directories."""
        self.assertEqual(get_rucio_path('user.jdoe', 'file.root'), 'user/jdoe/59/52/file.root')

    def test_print_rucio_paths(self):
        """The command line helper splits on the last colon, as translate() does."""
        output = io.StringIO()
        with contextlib.redirect_stdout(output):
            exit_code = print_rucio_paths(['a:b:c.root', 'nocolon'])

        self.assertEqual(output.getvalue(), 'a:b:c.root a:b/ba/3c/c.root\n')
        self.assertEqual(exit_code, FAILURE)


if __name__ == '__main__':
    unittest.main()
