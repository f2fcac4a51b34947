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

import logging
from typing import Any

LIBRDKAFKA_LOGGER_NAME = 'kafka_bridge.librdkafka'


def map_python_level(level: int) -> int:
    """
    Clamp a level emitted by confluent-kafka's log forwarding.

    confluent-kafka translates librdkafka's syslog severities before they
    reach Python, this narrows the result to the levels used for client
    diagnostics:

    ==========================  ====================  ===================
    syslog severity             confluent-kafka       forwarded as
    ==========================  ====================  ===================
    emerg, alert, crit          ``CRITICAL``          ``ERROR``
    err                         ``ERROR``             ``ERROR``
    warning                     ``WARNING``           ``WARNING``
    notice, info                ``INFO``              ``INFO``
    debug                       ``DEBUG``             ``DEBUG``
    ==========================  ====================  ===================
    """
    if level > logging.ERROR:
        return logging.ERROR
    if level <= logging.DEBUG:
        return logging.DEBUG
    return level


class LibrdkafkaLogger:
    """
    Receives librdkafka log lines and forwards them to a :py:class:`logging.Logger`.

    An instance is passed as the ``logger`` configuration property of each
    client. The client calls :py:meth:`LibrdkafkaLogger.log` while it is
    being polled or flushed.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        self.logger.log(map_python_level(level), msg, *args, **kwargs)


# Process wide sink shared by every handle
librdkafka_logger = LibrdkafkaLogger(logging.getLogger(LIBRDKAFKA_LOGGER_NAME))
