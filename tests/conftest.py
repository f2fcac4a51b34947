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

from unittest.mock import patch

import pytest

from kafka_bridge import ConnectionConfig, Consumer, Producer, Role
from tests.common import FakeProducerImpl, committed_offsets, serve_messages


@pytest.fixture()
def tls_files(tmp_path):
    """Three existing (placeholder) PEM files."""
    paths = {}
    for name in ('ca_location', 'certificate_location', 'key_location'):
        path = tmp_path / (name + '.pem')
        path.write_text('-----BEGIN PLACEHOLDER-----\n')
        paths[name] = str(path)
    return paths


@pytest.fixture()
def fake_impls(monkeypatch):
    FakeProducerImpl.instances = []
    monkeypatch.setattr('kafka_bridge.producer._ProducerImpl', FakeProducerImpl)


@pytest.fixture()
def mock_consumer():
    """
    Mock the underlying confluent_kafka.Consumer.

    The instance (``mock_consumer.return_value``) polls nothing and has no
    committed offsets until the test says otherwise.
    """
    with patch('kafka_bridge.consumer._ConsumerImpl') as mock:
        mock.return_value.poll.side_effect = serve_messages()
        mock.return_value.committed.side_effect = committed_offsets()
        yield mock


@pytest.fixture()
def producer(fake_impls):
    """A Producer handle backed by FakeProducerImpl, returns (handle, impl)."""
    p = Producer(ConnectionConfig.build('broker:9092', role=Role.PRODUCER))
    yield p, FakeProducerImpl.instances[-1]
    p.destroy()


@pytest.fixture()
def consumer(mock_consumer):
    """A Consumer handle backed by a mocked client, returns (handle, mock instance)."""
    c = Consumer(ConnectionConfig.build('broker:9092', group_id='test', role=Role.CONSUMER))
    yield c, mock_consumer.return_value
    c.close()
