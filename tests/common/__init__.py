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

import os
import threading
from collections import defaultdict
from unittest.mock import Mock

from confluent_kafka import OFFSET_INVALID, KafkaError, Message, TopicPartition

_BROKERS_ENV = 'BROKERS'
_SSL_CA_ENV = 'SSL_CA_LOCATION'
_SSL_CERT_ENV = 'SSL_CERTIFICATE_LOCATION'
_SSL_KEY_ENV = 'SSL_KEY_LOCATION'


class TestUtils:
    @staticmethod
    def brokers():
        return os.environ.get(_BROKERS_ENV, "")

    @staticmethod
    def tls_kwargs():
        """TLS paths from the environment, empty when not all three are set."""
        paths = {'ca_location': os.environ.get(_SSL_CA_ENV),
                 'certificate_location': os.environ.get(_SSL_CERT_ENV),
                 'key_location': os.environ.get(_SSL_KEY_ENV)}
        if all(paths.values()):
            return paths
        return {}


def mock_message(topic='test', partition=0, offset=0, key=None, value=None, error=None):
    """A Mock standing in for :py:class:`confluent_kafka.Message`."""
    msg = Mock(spec=Message)
    msg.topic.return_value = topic
    msg.partition.return_value = partition
    msg.offset.return_value = offset
    msg.key.return_value = key
    msg.value.return_value = value
    msg.error.return_value = error
    return msg


def serve_messages(*messages):
    """
    Side effect for a mocked ``Consumer.poll()`` returning ``messages`` in
    order and None once they are exhausted.
    """
    pending = list(messages)

    def poll(timeout=-1):
        if len(pending) == 0:
            return None
        return pending.pop(0)

    return poll


def committed_offsets(offsets=None):
    """
    Side effect for a mocked ``Consumer.committed()`` reporting the offsets
    in ``offsets``, keyed by (topic, partition), and no committed offset
    for any other partition.
    """
    offsets = offsets or {}

    def committed(partitions, timeout=-1):
        return [TopicPartition(tp.topic, tp.partition,
                               offsets.get((tp.topic, tp.partition), OFFSET_INVALID))
                for tp in partitions]

    return committed


class FakeProducerImpl(object):
    """
    Stands in for :py:class:`confluent_kafka.Producer`.

    Delivery reports for enqueued messages are served from ``poll()`` once
    ``polls_before_delivery`` polls have happened since enqueue.
    """
    instances = []

    def __init__(self, conf):
        self.conf = conf
        self.produce_error = None
        self.delivery_error = None
        self.polls_before_delivery = 0
        self.flush_remaining = 0
        self.partition_count = 3
        self.poll_calls = 0
        self.purged = False
        self.produced = []
        self._lock = threading.Lock()
        self._pending = []
        self._offsets = defaultdict(int)
        FakeProducerImpl.instances.append(self)

    def produce(self, topic, value=None, key=None, partition=-1, on_delivery=None):
        if self.produce_error is not None:
            raise self.produce_error
        with self._lock:
            if partition < 0:
                partition = (len(self.produced) if key is None else sum(key)) % self.partition_count
            self.produced.append((topic, value, key, partition))
            self._pending.append([self.polls_before_delivery, topic, partition, on_delivery])

    def _due(self):
        with self._lock:
            due = []
            for entry in list(self._pending):
                if entry[0] <= 0:
                    self._pending.remove(entry)
                    offset = self._offsets[(entry[1], entry[2])]
                    self._offsets[(entry[1], entry[2])] += 1
                    due.append((entry[1], entry[2], offset, entry[3]))
                else:
                    entry[0] -= 1
            return due

    def poll(self, timeout=-1):
        self.poll_calls += 1
        due = self._due()
        # Callbacks run without holding the producer lock
        for topic, partition, offset, cb in due:
            if cb is not None:
                cb(self.delivery_error, mock_message(topic, partition, offset))
        return len(due)

    def flush(self, timeout=-1):
        if self.flush_remaining > 0:
            return self.flush_remaining
        while len(self):
            self.poll(0)
        return 0

    def purge(self, in_queue=True, in_flight=True, blocking=True):
        self.purged = True
        with self._lock:
            purged, self._pending = self._pending, []
        for entry in purged:
            if entry[3] is not None:
                entry[3](KafkaError(KafkaError._PURGE_QUEUE), mock_message(entry[1], entry[2], -1))

    def __len__(self):
        with self._lock:
            return len(self._pending)
