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

"""Setup module for pip installation."""

import sys

from setuptools import setup, find_packages

sys.path.insert(0, '.')

# get release version
with open('REDIRECTORVERSION') as reader:
    release_version = reader.read().strip()

setup(
    name="eosrucio",
    version=release_version,
    description='EOS Rucio redirector',
    long_description='''This package resolves Rucio logical file names into physical file names on ranked storage endpoints''',
    license='Apache License 2.0',
    python_requires='>=3.9',
    packages=find_packages(),
    py_modules=['arguments', 'redirector'],
    install_requires=['requests'],
    extras_require={'test': ['pytest']},
    data_files=[],
    package_data={'eosrucio.util': ['default.cfg']},
    include_package_data=True,
    scripts=[]
)
