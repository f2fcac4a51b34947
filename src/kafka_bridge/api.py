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

"""
Function level interface for embedding kafka_bridge in a host runtime.

Every function takes the handle it operates on as its first argument and
timeouts are given in milliseconds.
"""
import threading
from typing import Any, Dict, Iterator, Optional, Union

from confluent_kafka import libversion

from ._model import DeliveryReceipt, Message, OffsetPolicy, PartitionEOF, Role
from ._util import ValidationUtil
from .config import ConnectionConfig
from .consumer import Consumer
from .error import ValidationError
from .producer import Producer


def _check_handle(handle, cls):
    if not isinstance(handle, cls):
        raise ValidationError("%s pointer is null" % (cls.__name__,))
    return handle


def _seconds(timeout_ms) -> float:
    ValidationUtil.check_int(timeout_ms, "timeout_ms")
    if timeout_ms < 0:
        raise ValidationError("timeout_ms must be >= 0")
    return timeout_ms / 1000.0


def version() -> str:
    """Returns the version string of the underlying librdkafka."""
    return libversion()[0]


def create_producer(bootstrap_servers,
                    ca_location: Optional[str] = None,
                    certificate_location: Optional[str] = None,
                    key_location: Optional[str] = None,
                    properties: Optional[Dict[str, Any]] = None) -> Producer:
    config = ConnectionConfig.build(bootstrap_servers,
                                    ca_location=ca_location,
                                    certificate_location=certificate_location,
                                    key_location=key_location,
                                    role=Role.PRODUCER,
                                    properties=properties)
    return Producer(config)


def create_consumer(bootstrap_servers,
                    group_id: str,
                    ca_location: Optional[str] = None,
                    certificate_location: Optional[str] = None,
                    key_location: Optional[str] = None,
                    offset_policy: Union[OffsetPolicy, str, None] = None,
                    properties: Optional[Dict[str, Any]] = None) -> Consumer:
    config = ConnectionConfig.build(bootstrap_servers,
                                    group_id=group_id,
                                    ca_location=ca_location,
                                    certificate_location=certificate_location,
                                    key_location=key_location,
                                    offset_policy=offset_policy,
                                    role=Role.CONSUMER,
                                    properties=properties)
    return Consumer(config)


def subscribe_by_topic(consumer: Consumer, topic: str,
                       offset_policy: Union[OffsetPolicy, str, None] = None) -> None:
    _check_handle(consumer, Consumer).subscribe_by_topic(topic, offset_policy)


def subscribe_at_offset(consumer: Consumer, topic: str, partition: int, offset: int) -> None:
    _check_handle(consumer, Consumer).subscribe_at_offset(topic, partition, offset)


def poll(consumer: Consumer, timeout_ms: int) -> Union[Message, PartitionEOF, None]:
    return _check_handle(consumer, Consumer).poll(_seconds(timeout_ms))


def send(producer: Producer, topic: str, value: Union[str, bytes],
         key: Union[str, bytes, None] = None,
         partition: Optional[int] = None) -> DeliveryReceipt:
    return _check_handle(producer, Producer).send(topic, value, key=key, partition=partition)


def flush(producer: Producer, timeout_ms: int) -> None:
    _check_handle(producer, Producer).flush(_seconds(timeout_ms))


def close_consumer(consumer: Optional[Consumer]) -> None:
    # None is tolerated so shutdown paths can call this unconditionally
    if consumer is None:
        return
    _check_handle(consumer, Consumer).close()


def destroy_producer(producer: Optional[Producer]) -> None:
    if producer is None:
        return
    _check_handle(producer, Producer).destroy()


def consume_from(config: ConnectionConfig, topic: str,
                 offset_policy: Union[OffsetPolicy, str, None] = None,
                 partition: Optional[int] = None,
                 offset: Optional[int] = None,
                 timeout_ms: int = 1000,
                 stop: Optional[threading.Event] = None) -> Iterator[Message]:
    """
    Create a consumer, subscribe it and yield its messages.

    When both ``partition`` and ``offset`` are given the consumer reads that
    partition from that offset, otherwise it subscribes to ``topic`` as part
    of ``config.group_id``. The consumer is closed when the generator is
    exhausted, closed or raises.

    Args:
        config (ConnectionConfig): Connection settings including the group id.

        topic (str): Topic to read.

        offset_policy (OffsetPolicy|str, optional): Used for group
            subscriptions, defaults to ``config.offset_policy``.

        partition (int, optional): Partition to read from.

        offset (int, optional): Offset to start at within ``partition``.

        timeout_ms (int): Maximum time for each poll.

        stop (threading.Event, optional): Ends the stream once set.
    """
    if (partition is None) != (offset is None):
        raise ValidationError("partition and offset must be given together")
    timeout = _seconds(timeout_ms)

    consumer = Consumer(config)
    try:
        if partition is not None:
            consumer.subscribe_at_offset(topic, partition, offset)
        else:
            consumer.subscribe_by_topic(topic, offset_policy)
        for msg in consumer.stream(timeout, stop=stop):
            yield msg
    finally:
        consumer.close()
