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

from ._model import (
    DeliveryReceipt,
    Message,
    OffsetPolicy,
    PartitionEOF,
    Role,
)
from .api import (
    close_consumer,
    consume_from,
    create_consumer,
    create_producer,
    destroy_producer,
    flush,
    poll,
    send,
    subscribe_at_offset,
    subscribe_by_topic,
    version,
)
from .config import ConnectionConfig, TlsMaterial
from .consumer import Consumer
from .error import BrokerError, ClientConnectionError, ConfigError, ValidationError
from .producer import Producer

__all__ = [
    "BrokerError",
    "ClientConnectionError",
    "ConfigError",
    "ConnectionConfig",
    "Consumer",
    "DeliveryReceipt",
    "Message",
    "OffsetPolicy",
    "PartitionEOF",
    "Producer",
    "Role",
    "TlsMaterial",
    "ValidationError",
    "close_consumer",
    "consume_from",
    "create_consumer",
    "create_producer",
    "destroy_producer",
    "flush",
    "poll",
    "send",
    "subscribe_at_offset",
    "subscribe_by_topic",
    "version",
]

__version__ = "1.0.0"
