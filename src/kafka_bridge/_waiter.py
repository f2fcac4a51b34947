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

import threading
from typing import Any, Optional

from confluent_kafka import KafkaError

from ._model import DeliveryReceipt
from .error import BrokerError


class DeliveryWaiter(object):
    """
    Carries the outcome of one produced message from the delivery callback
    to the thread blocked in :py:meth:`Producer.send`.

    :py:meth:`DeliveryWaiter.resolve` is passed as the message's
    ``on_delivery`` callback. It runs from within the producer's
    ``poll()``, possibly on a different sending thread's stack.

    The condition guards ``_done``, ``_error``, ``_partition`` and
    ``_offset`` and is never held while the producer is polled.
    """
    __slots__ = ['_cond', '_done', '_error', '_partition', '_offset']

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._done = False
        self._error = None
        self._partition = -1
        self._offset = -1

    def resolve(self, err: Optional[KafkaError], msg: Any) -> None:
        """
        Delivery callback, records the outcome and wakes one waiting thread.

        Only the first call has an effect.

        Args:
            err (KafkaError): Delivery error or None on success.

            msg (Message): The delivered (or failed) message.
        """
        with self._cond:
            if self._done:
                return
            self._error = err
            if msg is not None:
                self._partition = msg.partition()
                self._offset = msg.offset()
            self._done = True
            self._cond.notify()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Wait up to ``timeout`` seconds for the outcome.

        Returns:
            bool: True once the outcome has been recorded.
        """
        with self._cond:
            if not self._done:
                self._cond.wait(timeout)
            return self._done

    @property
    def done(self) -> bool:
        with self._cond:
            return self._done

    def receipt(self) -> DeliveryReceipt:
        """
        Returns:
            DeliveryReceipt: where the message was stored.

        Raises:
            BrokerError: if delivery failed.

            RuntimeError: if no outcome has been recorded yet.
        """
        with self._cond:
            if not self._done:
                raise RuntimeError("Delivery outcome is not available yet")
            err, partition, offset = self._error, self._partition, self._offset

        if err is not None and err.code() != KafkaError.NO_ERROR:
            raise BrokerError(err)
        return DeliveryReceipt(partition, offset)
