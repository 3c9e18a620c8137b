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

"""Unit tests for the xrdfs stat probe."""

import os
import shutil
import stat
import tempfile
import threading
import time
import unittest

from eosrucio.probe.base import ProbeStatus
from eosrucio.probe.xrdfs import (
    XrdfsProbe,
    get_stat_flags
)

STAT_OUTPUT = """Path:   /eos/atlas/atlasdatadisk/rucio/data/88/04/myfile.root
Id:     1234567
Size:   1048576
MTime:  2023-05-04 12:00:00
Flags:  48 (IsReadable|IsWritable)"""


def check_env() -> bool:
    """
    Check whether fake xrdfs scripts can be executed.

    :return: True if /bin/sh is available (bool).
    """
    return os.path.exists('/bin/sh')


class TestStatFlags(unittest.TestCase):
    """Unit tests for the stat output parsing."""

    def test_get_stat_flags(self):
        self.assertEqual(get_stat_flags(STAT_OUTPUT), {'IsReadable', 'IsWritable'})
        self.assertEqual(get_stat_flags('Flags:  16 (IsReadable)'), {'IsReadable'})
        self.assertEqual(get_stat_flags('Flags:  0 (None)'), {'None'})
        self.assertEqual(get_stat_flags('no flags here'), set())

    def test_get_command(self):
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command='xrdfs')

        self.assertEqual(probe.get_command('/eos/f'), ['xrdfs', 'eosatlas.cern.ch:1094', 'stat', '/eos/f'])


@unittest.skipIf(not check_env(), "No shell available")
class TestXrdfsProbe(unittest.TestCase):
    """Unit tests for XrdfsProbe with fake xrdfs commands."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        """Remove test fixtures."""
        shutil.rmtree(self.tmpdir)

    def make_command(self, body: str) -> str:
        path = os.path.join(self.tmpdir, 'xrdfs')
        with open(path, 'w', encoding='utf-8') as _file:
            _file.write('#!/bin/sh\n' + body + '\n')
        os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR)
        return path

    def test_reachable(self):
        command = self.make_command(f"cat <<'END'\n{STAT_OUTPUT}\nEND")
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=command)

        self.assertEqual(probe.probe('/eos/f', timeout=5), ProbeStatus.REACHABLE)

    def test_read_only(self):
        """A file that is not writable does not count as reachable."""
        command = self.make_command("echo 'Flags:  16 (IsReadable)'")
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=command)

        self.assertEqual(probe.probe('/eos/f', timeout=5), ProbeStatus.UNREACHABLE)

    def test_no_such_file(self):
        command = self.make_command("echo '[ERROR] Server responded with an error: [3011] No such file' >&2\nexit 54")
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=command)

        self.assertEqual(probe.probe('/eos/f', timeout=5), ProbeStatus.UNREACHABLE)

    def test_timeout(self):
        """A hanging stat is abandoned after the timeout."""
        command = self.make_command("sleep 30")
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=command)

        t0 = time.time()
        status = probe.probe('/eos/f', timeout=0.5)

        self.assertEqual(status, ProbeStatus.ERROR)
        self.assertLess(time.time() - t0, 20)

    def test_cancel(self):
        command = self.make_command("sleep 30")
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=command)
        cancel = threading.Event()
        timer = threading.Timer(0.3, cancel.set)
        timer.start()

        t0 = time.time()
        status = probe.probe('/eos/f', timeout=30, cancel=cancel)
        timer.join()

        self.assertEqual(status, ProbeStatus.UNREACHABLE)
        self.assertLess(time.time() - t0, 20)

    def test_missing_command(self):
        probe = XrdfsProbe('eosatlas.cern.ch:1094', command=os.path.join(self.tmpdir, 'missing'))

        self.assertEqual(probe.probe('/eos/f', timeout=1), ProbeStatus.ERROR)


if __name__ == '__main__':
    unittest.main()
