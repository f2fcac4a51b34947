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
from typing import Optional, Union

from confluent_kafka import KafkaError, KafkaException
from confluent_kafka import Producer as _ProducerImpl

from ._handle import ClientHandle, apply_diagnostics, apply_security
from ._model import DeliveryReceipt, Role
from ._util import ValidationUtil
from ._waiter import DeliveryWaiter
from .config import ACKS, BOOTSTRAP_SERVERS, ClientConf, ConnectionConfig
from .error import BrokerError, ValidationError

logger = logging.getLogger(__name__)

# Upper bound of a single poll() while waiting for a delivery report
POLL_TICK = 0.1
# Upper bound of a single wait on the delivery waiter between polls
WAIT_TICK = 0.05


class Producer(ClientHandle):
    """
    A Kafka producer whose :py:meth:`Producer.send` blocks until the broker
    has acknowledged the message.

    Messages are acknowledged by all in-sync replicas (``acks=all``).

    The Producer is thread safe, several threads may call
    :py:meth:`Producer.send` on the same instance concurrently.

    Args:
        config (ConnectionConfig): Connection settings.

    Raises:
        ValidationError: if ``config`` is not a ConnectionConfig.

        ConfigError: if a configuration property is rejected.

        ClientConnectionError: if the producer instance could not be created.
    """
    role = Role.PRODUCER

    def _configure(self, conf: ClientConf, config: ConnectionConfig) -> None:
        conf.set(BOOTSTRAP_SERVERS, ",".join(config.bootstrap_servers))
        apply_security(conf, config)
        conf.set(ACKS, 'all')
        apply_diagnostics(conf)
        conf.update(config.properties)

    def _factory(self):
        return _ProducerImpl

    def send(self, topic: str, value: Union[str, bytes],
             key: Union[str, bytes, None] = None,
             partition: Optional[int] = None) -> DeliveryReceipt:
        """
        Produce a message and wait for its delivery report.

        The key and value are copied before this method enqueues them, the
        caller's buffers may be reused as soon as it returns or raises.

        This call has no timeout and cannot be cancelled once the message
        has been enqueued, it returns when the delivery report arrives
        (bounded by the ``message.timeout.ms`` property). No retries are
        made beyond those performed by librdkafka.

        Args:
            topic (str): Topic to produce to.

            value (bytes|str): Message payload, may be empty but not None.
                str is encoded as UTF-8.

            key (bytes|str, optional): Message key.

            partition (int, optional): Partition to produce to, else the
                configured partitioner chooses one.

        Returns:
            DeliveryReceipt: partition and offset assigned to the message.

        Raises:
            ValidationError: if the handle is closed or an argument is invalid.

            BrokerError: if the message could not be enqueued or its delivery
                failed.
        """
        impl = self._native()
        ValidationUtil.check_non_empty_string(topic, "topic")
        if value is None:
            raise ValidationError("Invalid arguments: value cannot be None")
        value = ValidationUtil.to_bytes(value, "value")
        key = ValidationUtil.to_bytes(key, "key")

        kwargs = {}
        if partition is not None:
            kwargs['partition'] = ValidationUtil.check_non_negative_int(partition, "partition")

        waiter = DeliveryWaiter()
        try:
            impl.produce(topic, value, key, on_delivery=waiter.resolve, **kwargs)
        except BufferError as e:
            raise BrokerError(KafkaError._QUEUE_FULL, str(e))
        except KafkaException as e:
            raise BrokerError(e.args[0])

        while True:
            # poll() may run waiter.resolve on this thread, never poll
            # while holding the waiter's lock.
            impl.poll(POLL_TICK)
            if waiter.wait(WAIT_TICK):
                break

        return waiter.receipt()

    def flush(self, timeout: Optional[float] = None) -> None:
        """
        Wait for all outstanding messages to be delivered.

        Args:
            timeout (float, optional): Maximum time to block (seconds),
                None waits indefinitely.

        Raises:
            ValidationError: if the handle is closed.

            BrokerError: if messages are still outstanding when the timeout
                elapses.
        """
        impl = self._native()
        timeout = ValidationUtil.check_timeout(timeout)
        remaining = impl.flush() if timeout is None else impl.flush(timeout)
        if remaining > 0:
            raise BrokerError(KafkaError._TIMED_OUT,
                              "%d message(s) still in queue or transit" % (remaining,))

    def destroy(self) -> None:
        """
        Release the producer without flushing.

        Messages that have not been delivered yet are purged. Call
        :py:meth:`Producer.flush` first if they must be delivered. Calling
        this more than once has no effect.
        """
        if self._closed:
            return
        impl = self._release()
        impl.purge(in_queue=True, in_flight=True, blocking=False)
        # Serve the purged messages' delivery reports before the client
        # is dropped.
        impl.poll(0)
        logger.info("Destroyed producer")

    def __len__(self):
        return len(self._native())

    def __bool__(self):
        return True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.destroy()
