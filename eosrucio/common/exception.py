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

"""Exceptions set by the redirector."""

import traceback

from .errorcodes import ErrorCodes
errors = ErrorCodes()


class RedirectorException(Exception):
    """Redirector exceptions class."""

    def __init__(self, *args, **kwargs):
        """Set default or initial values."""
        super().__init__(args, kwargs)
        self.args = args
        self.kwargs = kwargs
        code = self.kwargs.get('code', None)
        if code:
            self._errorCode = code
        else:
            self._errorCode = errors.UNKNOWNEXCEPTION
        self._message = errors.get_error_message(self._errorCode)
        self._error_string = None
        self._stack_trace = f'{traceback.format_exc()}'

    def __str__(self):
        """Set and return the error string for string representation of the class instance."""
        try:
            self._error_string = f"error code: {self._errorCode}, message: {self._message % self.kwargs}"
        except TypeError:
            # at least get the core message out if something happened
            self._error_string = f"error code: {self._errorCode}, message: {self._message}"

        if len(self.args) > 0:
            # a non-kwarg parameter is the reason description, tack it on to the end
            try:
                args = [f'{arg}' for arg in self.args if arg]
            except TypeError:
                args = [f'{self.args}']
            self._error_string = self._error_string + "\ndetails: %s" % '\n'.join(args)
        return self._error_string.strip()

    def get_detail(self):
        """Set and return the error string with the exception details."""
        try:
            self._error_string = f"error code: {self._errorCode}, message: {self._message % self.kwargs}"
        except TypeError:
            self._error_string = f"error code: {self._errorCode}, message: {self._message}"

        return self._error_string + f"\nstacktrace: {self._stack_trace}"

    def get_error_code(self):
        """Return the error code."""
        return self._errorCode

    def get_last_error(self):
        """Return the last error message."""
        if self.args:
            return self.args[-1]
        return self._message


class ConfigurationFailure(RedirectorException):
    """Invalid or incomplete configuration, the redirector must not start."""

    def __init__(self, *args, **kwargs):
        """Set default and initial values."""
        super().__init__(*args, **kwargs)
        if not kwargs.get('code'):
            self._errorCode = errors.CONFIGURATIONFAILURE
        self._message = errors.get_error_message(self._errorCode)


class RegistryFailure(RedirectorException):
    """Failed to read a site registry source."""

    def __init__(self, *args, **kwargs):
        """Set default and initial values."""
        super().__init__(*args, **kwargs)
        if not kwargs.get('code'):
            self._errorCode = errors.REGISTRYFAILURE
        self._message = errors.get_error_message(self._errorCode)
