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

import logging
import threading
from typing import Iterator, List, Optional, Union

from confluent_kafka import (OFFSET_BEGINNING,
                             OFFSET_END,
                             KafkaError,
                             KafkaException,
                             TopicPartition)
from confluent_kafka import Consumer as _ConsumerImpl

from ._handle import ClientHandle, apply_diagnostics, apply_security
from ._model import Message, OffsetPolicy, PartitionEOF, Role
from ._util import ValidationUtil
from .config import (AUTO_OFFSET_RESET,
                     BOOTSTRAP_SERVERS,
                     ENABLE_PARTITION_EOF,
                     GROUP_ID,
                     ClientConf,
                     ConnectionConfig)
from .error import BrokerError, ValidationError

logger = logging.getLogger(__name__)

# Upper bound on the committed offset lookup made during a rebalance when a
# subscription overrides the configured offset policy
COMMITTED_TIMEOUT = 10.0

_SUBSCRIBED = 'subscribe'
_ASSIGNED = 'assign'


def _is_incremental(properties) -> bool:
    strategy = str(properties.get('partition.assignment.strategy', ''))
    protocol = str(properties.get('group.protocol', ''))
    return 'cooperative' in strategy or protocol == 'consumer'


class Consumer(ClientHandle):
    """
    A Kafka consumer reading either through a consumer group subscription
    or from an explicitly assigned partition and offset.

    The two modes are exclusive, a handle that has subscribed cannot be
    assigned and vice versa.

    The Consumer is not thread safe, :py:meth:`Consumer.poll` must not be
    called from several threads at once.

    Args:
        config (ConnectionConfig): Connection settings, ``group_id`` is
            required.

    Raises:
        ValidationError: if ``config`` has no group id.

        ConfigError: if a configuration property is rejected.

        ClientConnectionError: if the consumer instance could not be created.
    """
    role = Role.CONSUMER

    def __init__(self, config: ConnectionConfig) -> None:
        self._mode = None
        self._incremental = False
        super(Consumer, self).__init__(config)
        self._incremental = _is_incremental(config.properties)
        self._offset_policy = config.offset_policy

    def _configure(self, conf: ClientConf, config: ConnectionConfig) -> None:
        conf.set(BOOTSTRAP_SERVERS, ",".join(config.bootstrap_servers))
        conf.set(GROUP_ID, config.group_id)
        apply_security(conf, config)
        conf.set(AUTO_OFFSET_RESET, config.offset_policy.value)
        conf.set(ENABLE_PARTITION_EOF, 'true')
        apply_diagnostics(conf)
        conf.update(config.properties)

    def _factory(self):
        return _ConsumerImpl

    def _enter_mode(self, mode: str) -> None:
        if self._mode is not None and self._mode != mode:
            raise ValidationError("Consumer is already using %s mode, subscription modes cannot be mixed" %
                                  (self._mode,))

    def _on_assign(self, policy: OffsetPolicy):
        """
        Rebalance callback starting partitions without a committed offset at
        ``policy`` instead of the configured ``auto.offset.reset``.

        The committed offsets are looked up synchronously from within
        :py:meth:`Consumer.poll`, which can then block for up to
        :py:data:`COMMITTED_TIMEOUT` beyond its own timeout.
        """
        start = OFFSET_BEGINNING if policy is OffsetPolicy.EARLIEST else OFFSET_END

        def on_assign(consumer, partitions: List[TopicPartition]) -> None:
            if len(partitions) == 0:
                return
            committed = consumer.committed(partitions, timeout=COMMITTED_TIMEOUT)
            offsets = {(tp.topic, tp.partition): tp.offset for tp in committed}
            for tp in partitions:
                if offsets.get((tp.topic, tp.partition), -1) < 0:
                    tp.offset = start
            if self._incremental:
                consumer.incremental_assign(partitions)
            else:
                consumer.assign(partitions)
            logger.debug("Assigned %s", partitions)

        return on_assign

    def subscribe_by_topic(self, topic: str,
                           offset_policy: Union[OffsetPolicy, str, None] = None) -> None:
        """
        Join the consumer group and subscribe to ``topic``.

        Partitions are assigned by the group coordinator. Assigned
        partitions that have no committed offset for the group start at
        the position given by ``offset_policy``.

        With the policy the consumer was created with, the client's
        ``auto.offset.reset`` positions the partitions. A different policy
        is applied on every rebalance after looking up the group's
        committed offsets, the :py:meth:`Consumer.poll` that handles the
        rebalance may block for up to :py:data:`COMMITTED_TIMEOUT` longer
        than requested.

        Args:
            topic (str): Topic to subscribe to.

            offset_policy (OffsetPolicy|str, optional): ``earliest`` or
                ``latest``, defaults to the policy the consumer was
                created with.

        Raises:
            ValidationError: if the handle is closed, an argument is invalid
                or the handle was assigned with
                :py:meth:`Consumer.subscribe_at_offset`.

            BrokerError: if the subscription was rejected.
        """
        impl = self._native()
        ValidationUtil.check_non_empty_string(topic, "topic")
        if offset_policy is None:
            policy = self._offset_policy
        else:
            policy = OffsetPolicy.parse(offset_policy)
        self._enter_mode(_SUBSCRIBED)

        try:
            if policy is self._offset_policy:
                impl.subscribe([topic])
            else:
                impl.subscribe([topic], on_assign=self._on_assign(policy))
        except KafkaException as e:
            raise BrokerError(e.args[0])

        self._mode = _SUBSCRIBED
        logger.info("Subscribed to topic=%s with offset policy=%s", topic, policy.value)

    def subscribe_at_offset(self, topic: str, partition: int, offset: int) -> None:
        """
        Read ``topic`` partition ``partition`` starting at ``offset``.

        This assigns the partition directly and bypasses consumer group
        coordination.

        Args:
            topic (str): Topic to read.

            partition (int): Partition index.

            offset (int): Absolute offset or a logical offset such as
                :py:data:`confluent_kafka.OFFSET_BEGINNING`.

        Raises:
            ValidationError: if the handle is closed, an argument is invalid
                or the handle subscribed with
                :py:meth:`Consumer.subscribe_by_topic`.

            BrokerError: if the assignment was rejected.
        """
        impl = self._native()
        ValidationUtil.check_non_empty_string(topic, "topic")
        ValidationUtil.check_non_negative_int(partition, "partition")
        ValidationUtil.check_int(offset, "offset")
        self._enter_mode(_ASSIGNED)

        try:
            impl.assign([TopicPartition(topic, partition, offset)])
        except KafkaException as e:
            raise BrokerError(e.args[0])

        self._mode = _ASSIGNED
        logger.info("Assigned topic=%s partition=%d at offset=%d", topic, partition, offset)

    def poll(self, timeout: float = 1.0) -> Union[Message, PartitionEOF, None]:
        """
        Wait up to ``timeout`` seconds for the next message.

        A rebalance handled by this call for a subscription that overrides
        the configured offset policy can extend the wait by up to
        :py:data:`COMMITTED_TIMEOUT`, see :py:meth:`Consumer.subscribe_by_topic`.

        Returns:
            Message: the next message, or

            PartitionEOF: if the end of a partition has been reached, or

            None: if nothing arrived within ``timeout``.

        Raises:
            ValidationError: if the handle is closed.

            BrokerError: if the broker reported an error.
        """
        impl = self._native()
        timeout = ValidationUtil.check_timeout(timeout)

        try:
            msg = impl.poll(timeout)
        except KafkaException as e:
            raise BrokerError(e.args[0])

        if msg is None:
            return None

        err = msg.error()
        if err is not None:
            if err.code() == KafkaError._PARTITION_EOF:
                return PartitionEOF(msg.topic(), msg.partition(), msg.offset())
            raise BrokerError(err)

        return Message(ValidationUtil.to_bytes(msg.key(), "key"),
                       ValidationUtil.to_bytes(msg.value(), "value"),
                       msg.topic(),
                       msg.partition(),
                       msg.offset())

    def stream(self, timeout: float = 1.0,
               stop: Optional[threading.Event] = None) -> Iterator[Message]:
        """
        Yield messages until ``stop`` is set or the generator is closed.

        Empty polls and end of partition markers are skipped.

        Args:
            timeout (float): Maximum time for each poll (seconds).

            stop (threading.Event, optional): Ends the stream once set.

        Raises:
            BrokerError: if the broker reported an error.
        """
        poll_count = 0
        message_count = 0
        while stop is None or not stop.is_set():
            msg = self.poll(timeout)
            poll_count += 1
            if isinstance(msg, Message):
                message_count += 1
                logger.debug("Polled message #%d: topic=%s, partition=%d, offset=%d",
                             message_count, msg.topic, msg.partition, msg.offset)
                yield msg
            elif poll_count % 10 == 0:
                logger.debug("Polled %d times, received %d messages", poll_count, message_count)
        logger.info("Consumer stream stopped: polled %d times, received %d messages",
                    poll_count, message_count)

    def close(self) -> None:
        """
        Commit final offsets, leave the consumer group and release the consumer.

        Failures while leaving the group are logged and otherwise ignored,
        the consumer is always released. Calling this more than once has no
        effect.
        """
        if self._closed:
            return
        impl = self._release()
        try:
            impl.close()
        except (KafkaException, RuntimeError) as e:
            logger.warning("Failed to close consumer cleanly: %s", e)
        logger.info("Closed consumer")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.close()
