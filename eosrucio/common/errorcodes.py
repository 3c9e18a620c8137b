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

"""Error codes set by the redirector."""


class ErrorCodes:
    """
    Redirector error codes.

    Configuration errors stop the redirector. Registry and probe errors are
    recovered locally and only show up in the log.
    """

    # Error code constants
    GENERALERROR = 1000
    CONFIGURATIONFAILURE = 1001
    NOCONFIGFILE = 1002
    MISSINGSITENAME = 1003
    INVALIDINSTANCE = 1004
    INVALIDUPLINK = 1005
    EMPTYREGISTRY = 1010
    REGISTRYFAILURE = 1011
    MALFORMEDRECORD = 1012
    PROBEFAILURE = 1020
    PROBETIMEOUT = 1021
    PROBECANCELLED = 1022
    COMMANDTIMEDOUT = 1030
    UNKNOWNEXCEPTION = 1099

    _error_messages = {
        GENERALERROR: "General redirector error",
        CONFIGURATIONFAILURE: "Configuration failure",
        NOCONFIGFILE: "No configuration file",
        MISSINGSITENAME: "Mandatory site name value missing",
        INVALIDINSTANCE: "Storage redirect instance value missing or invalid",
        INVALIDUPLINK: "Uplink instance value missing or invalid",
        EMPTYREGISTRY: "The Rucio space token map is empty",
        REGISTRYFAILURE: "Failed to read the site registry",
        MALFORMEDRECORD: "Incomplete record in site registry",
        PROBEFAILURE: "Failed to stat candidate PFN",
        PROBETIMEOUT: "Stat of candidate PFN timed out",
        PROBECANCELLED: "Stat of candidate PFN was cancelled",
        COMMANDTIMEDOUT: "Command timed out",
        UNKNOWNEXCEPTION: "An unknown exception occurred",
    }

    def get_error_message(self, errorcode: int) -> str:
        """
        Return the error message corresponding to the given error code.

        :param errorcode: error code (int)
        :return: errormessage (str).
        """
        return self._error_messages.get(errorcode, f"unknown error code: {errorcode}")

    @classmethod
    def get_error_name(cls, code: int) -> str:
        """
        Return the name of the error constant given its value.

        Assumes that error constants are defined as uppercase integers in the class.
        """
        for name, value in cls.__dict__.items():
            if isinstance(value, int) and value == code and name.isupper():
                return name

        return str(code)  # fallback if not found
