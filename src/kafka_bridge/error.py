#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 Confluent Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

from typing import Optional

from confluent_kafka import KafkaError, KafkaException


class ValidationError(ValueError):
    """
    Raised when caller supplied arguments violate a precondition.

    No library or network interaction has taken place when this is raised.
    """
    pass


class _BridgeException(KafkaException):
    """
    Base for errors wrapping a :py:class:`confluent_kafka.KafkaError`.

    The wrapped error is available as ``args[0]``, same as for
    :py:class:`confluent_kafka.KafkaException`.

    Args:
        error (KafkaError|int): Error instance, or error code to wrap.

        reason (str, optional): Human readable description. Defaults to
            librdkafka's description of the error code.
    """
    def __init__(self, error, reason=None):
        if not isinstance(error, KafkaError):
            error = KafkaError(error, reason) if reason is not None else KafkaError(error)
        super(_BridgeException, self).__init__(error)

    @property
    def error(self) -> KafkaError:
        return self.args[0]

    @property
    def code(self) -> int:
        return self.args[0].code()

    @property
    def reason(self) -> str:
        return self.args[0].str()

    def __str__(self):
        return self.reason


class ConfigError(_BridgeException):
    """
    A configuration property was rejected.

    All configuration applied so far has been released when this is raised.

    Args:
        prop (str, optional): Name of the rejected property.

        reason (str): Rejection text for that property.
    """
    def __init__(self, prop: Optional[str], reason: str):
        super(ConfigError, self).__init__(KafkaError._INVALID_ARG, reason)
        self.property = prop


class ClientConnectionError(_BridgeException):
    """
    Configuration was accepted but the client instance could not be created.
    """
    pass


class BrokerError(_BridgeException):
    """
    Wraps a broker reported error for subscribe, poll, send or flush.

    These errors are not fatal to the process and leave the handle usable.
    """
    pass
