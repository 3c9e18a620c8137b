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

"""Unit tests for the redirect decisions."""

import threading
import unittest
from unittest import mock

from eosrucio.api.redirector import (
    Redirect,
    RucioRedirector
)
from eosrucio.common.errorcodes import ErrorCodes
from eosrucio.common.exception import ConfigurationFailure
from eosrucio.probe.base import StaticProbe
from eosrucio.probe.xrdfs import XrdfsProbe
from eosrucio.util.directives import Directives
from arguments import get_args
from redirector import main

errors = ErrorCodes()

LFN = '/atlas/rucio/data:myfile.root'
PARTIAL = 'rucio/data/88/04/myfile.root'


def make_directives() -> Directives:
    directives = Directives()
    directives.site = 'CERN-PROD'
    directives.overrides = ['/eos/atlas/atlasdatadisk', '/eos/atlas/atlasscratchdisk']
    directives.eoshost = 'eosatlas.cern.ch'
    directives.eosport = 1094
    directives.uphost = 'atlas-xrd-eu.cern.ch'
    directives.upport = 1095
    return directives


class TestRucioRedirector(unittest.TestCase):
    """Unit tests for RucioRedirector."""

    def test_redirect_to_storage(self):
        """A reachable PFN sends the client to the storage instance with the PFN in the opaque part."""
        pfn = '/eos/atlas/atlasscratchdisk/' + PARTIAL
        redirector = RucioRedirector.from_config(make_directives(), probe=StaticProbe([pfn]))
        redirect = redirector.locate(LFN)

        self.assertEqual(redirect, Redirect(Redirect.REDIRECT, 'eosatlas.cern.ch', 1094, f'eos.lfn={pfn}&eos.app=lfc'))
        self.assertEqual(redirect.url, f'root://eosatlas.cern.ch:1094/?eos.lfn={pfn}&eos.app=lfc')
        self.assertEqual(redirector.resolver.registry.get_priority('/eos/atlas/atlasscratchdisk/'), 1)

    def test_redirect_to_uplink(self):
        redirector = RucioRedirector.from_config(make_directives(), probe=StaticProbe())

        for path in (LFN, '/eos/atlas/user/file.root'):
            with self.subTest(path=path):
                redirect = redirector.locate(path, tident='user.1:2@host')
                self.assertEqual(redirect, Redirect(Redirect.REDIRECT, 'atlas-xrd-eu.cern.ch', 1095))
                self.assertEqual(redirect.url, 'root://atlas-xrd-eu.cern.ch:1095/')

    def test_namespace_root(self):
        redirector = RucioRedirector.from_config(make_directives(), probe=StaticProbe())

        self.assertEqual(redirector.locate('/atlas').kind, Redirect.OK)
        self.assertEqual(redirector.locate('/atlas').url, '')

    def test_cancelled_goes_to_uplink(self):
        redirector = RucioRedirector.from_config(make_directives(), probe=StaticProbe())
        cancel = threading.Event()
        cancel.set()

        self.assertEqual(redirector.locate(LFN, cancel=cancel).host, 'atlas-xrd-eu.cern.ch')

    def test_default_probe(self):
        redirector = RucioRedirector.from_config(make_directives())

        self.assertIsInstance(redirector.resolver.probe, XrdfsProbe)
        self.assertEqual(redirector.resolver.probe.instance, 'eosatlas.cern.ch:1094')

    def test_space(self):
        redirector = RucioRedirector.from_config(make_directives(), probe=StaticProbe())

        self.assertEqual(redirector.space('/atlas'), 0)

    def test_no_registry_source(self):
        directives = make_directives()
        directives.overrides = []
        with self.assertRaises(ConfigurationFailure) as context:
            RucioRedirector.from_config(directives, probe=StaticProbe())

        self.assertEqual(context.exception.get_error_code(), errors.EMPTYREGISTRY)

    def test_empty_registry(self):
        """A site registry without the site is a configuration failure."""
        directives = make_directives()
        directives.overrides = []
        directives.agis = 'http://agis.example.org/sites?json'
        with mock.patch('eosrucio.info.sitedata.DataLoader.load_json', return_value=[{'rc_site': 'OTHER'}]):
            with self.assertRaises(ConfigurationFailure) as context:
                RucioRedirector.from_config(directives, probe=StaticProbe())

        self.assertEqual(context.exception.get_error_code(), errors.EMPTYREGISTRY)

    def test_agis_registry(self):
        directives = make_directives()
        directives.overrides = []
        directives.agis = 'http://agis.example.org/sites?json'
        document = [{'rc_site': 'CERN-PROD', 'aprotocols': {'r': [[0, 4, '/eos/atlas/atlasdatadisk/']]}}]
        with mock.patch('eosrucio.info.sitedata.DataLoader.load_json', return_value=document) as load_json:
            redirector = RucioRedirector.from_config(directives, probe=StaticProbe())

        load_json.assert_called_once_with('http://agis.example.org/sites?json')
        self.assertEqual(redirector.resolver.registry.get_priority('/eos/atlas/atlasdatadisk/'), 4)

    def test_invalid_configuration(self):
        directives = make_directives()
        directives.site = ''
        with self.assertRaises(ConfigurationFailure):
            RucioRedirector.from_config(directives, probe=StaticProbe())

    def test_main_configuration_failure(self):
        """The command line exits with the low byte of the configuration error code."""
        args = get_args(['--config', '/nonexistent/xrootd.cf', '--no-log', LFN])

        self.assertEqual(main(args, threading.Event()), errors.NOCONFIGFILE % 256)


if __name__ == '__main__':
    unittest.main()
