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

import pytest
from attrs.exceptions import FrozenInstanceError

from confluent_kafka import KafkaError

from kafka_bridge import ConfigError, ConnectionConfig, OffsetPolicy, Role, TlsMaterial, ValidationError
from kafka_bridge._log import librdkafka_logger
from kafka_bridge.config import ClientConf


def test_build_defaults():
    conf = ConnectionConfig.build('broker:9092')
    assert conf.bootstrap_servers == ('broker:9092',)
    assert conf.group_id is None
    assert conf.tls is None
    assert conf.offset_policy is OffsetPolicy.LATEST
    assert conf.properties == {}
    assert not conf.secured


def test_build_servers():
    conf = ConnectionConfig.build(' b1:9093 ,b2:9093')
    assert conf.bootstrap_servers == ('b1:9093', 'b2:9093')

    conf = ConnectionConfig.build(['b1:9093', 'b2:9093'])
    assert conf.bootstrap_servers == ('b1:9093', 'b2:9093')

    for empty in ('', [], None, ()):
        with pytest.raises(ValidationError, match='Brokers cannot be empty|cannot be empty'):
            ConnectionConfig.build(empty)

    with pytest.raises(ValidationError, match='Bootstrap server entries cannot be empty'):
        ConnectionConfig.build('b1:9093,,b2:9093')

    with pytest.raises(ValidationError):
        ConnectionConfig.build(9092)

    with pytest.raises(ValidationError, match='to be strings'):
        ConnectionConfig.build(['b1:9093', None])


def test_build_tls(tls_files):
    conf = ConnectionConfig.build('broker:9093', **tls_files)
    assert conf.secured
    assert conf.tls == TlsMaterial(tls_files['ca_location'],
                                   tls_files['certificate_location'],
                                   tls_files['key_location'])


@pytest.mark.parametrize("missing", ['ca_location', 'certificate_location', 'key_location'])
def test_build_partial_tls(missing):
    paths = {'ca_location': '/tmp/ca.crt',
             'certificate_location': '/tmp/client.crt',
             'key_location': '/tmp/client.key'}
    paths[missing] = None
    with pytest.raises(ValidationError, match='missing: %s' % (missing,)):
        ConnectionConfig.build('broker:9093', **paths)

    # Empty strings count as missing
    paths[missing] = ''
    with pytest.raises(ValidationError, match='must be provided together'):
        ConnectionConfig.build('broker:9093', **paths)


def test_build_tls_does_no_io():
    conf = ConnectionConfig.build('broker:9093',
                                  ca_location='/nonexistent/ca.crt',
                                  certificate_location='/nonexistent/client.crt',
                                  key_location='/nonexistent/client.key')
    assert conf.tls.key_location == '/nonexistent/client.key'


def test_build_group_id():
    conf = ConnectionConfig.build('broker:9092', group_id='grp', role=Role.CONSUMER)
    assert conf.group_id == 'grp'

    with pytest.raises(ValidationError, match='Group ID cannot be null'):
        ConnectionConfig.build('broker:9092', role=Role.CONSUMER)

    with pytest.raises(ValidationError, match='group_id cannot be empty'):
        ConnectionConfig.build('broker:9092', group_id='')

    # Producers don't need a group
    ConnectionConfig.build('broker:9092', role=Role.PRODUCER)


def test_offset_policy():
    assert ConnectionConfig.build('b:1', offset_policy='EARLIEST').offset_policy is OffsetPolicy.EARLIEST
    assert ConnectionConfig.build('b:1', offset_policy=' latest ').offset_policy is OffsetPolicy.LATEST
    assert ConnectionConfig.build('b:1', offset_policy=OffsetPolicy.EARLIEST).offset_policy is OffsetPolicy.EARLIEST

    for bad in ('smallest', 'none', 1):
        with pytest.raises(ValidationError, match='Invalid offset policy'):
            ConnectionConfig.build('b:1', offset_policy=bad)


def test_properties_are_copied():
    props = {'linger.ms': 5}
    conf = ConnectionConfig.build('b:1', properties=props)
    props['linger.ms'] = 10
    assert conf.properties == {'linger.ms': 5}

    with pytest.raises(ValidationError, match='Expected properties to be a dict'):
        ConnectionConfig.build('b:1', properties=[('linger.ms', 5)])


def test_config_is_immutable():
    conf = ConnectionConfig.build('b:1')
    with pytest.raises(FrozenInstanceError):
        conf.group_id = 'other'


def test_from_dict(tls_files):
    source = {'bootstrap.servers': 'b1:9093,b2:9093',
              'group.id': 'grp',
              'ssl.ca.location': tls_files['ca_location'],
              'ssl.certificate.location': tls_files['certificate_location'],
              'ssl.key.location': tls_files['key_location'],
              'auto.offset.reset': 'earliest',
              'session.timeout.ms': 6000}
    original = dict(source)

    conf = ConnectionConfig.from_dict(source, role=Role.CONSUMER)
    assert source == original
    assert conf.bootstrap_servers == ('b1:9093', 'b2:9093')
    assert conf.group_id == 'grp'
    assert conf.secured
    assert conf.offset_policy is OffsetPolicy.EARLIEST
    assert conf.properties == {'session.timeout.ms': 6000}


def test_from_dict_managed_properties():
    for managed in ('security.protocol', 'acks'):
        with pytest.raises(ValidationError, match='%s is managed' % (managed,)):
            ConnectionConfig.from_dict({'bootstrap.servers': 'b:1', managed: 'all'})

    with pytest.raises(ValidationError, match='Brokers cannot be empty'):
        ConnectionConfig.from_dict({'group.id': 'grp'})

    with pytest.raises(ValidationError, match='Expected configuration dict'):
        ConnectionConfig.from_dict('bootstrap.servers=b:1')


def test_tls_from_directory(tmp_path):
    tls = TlsMaterial.from_directory(str(tmp_path))
    assert tls.ca_location == os.path.join(str(tmp_path), 'ca.crt')
    assert tls.certificate_location == os.path.join(str(tmp_path), 'client.crt')
    assert tls.key_location == os.path.join(str(tmp_path), 'client.key')

    tls = TlsMaterial.from_directory('/certs', ca='root.pem', certificate='me.pem', key='me.key')
    assert tls == TlsMaterial('/certs/root.pem', '/certs/me.pem', '/certs/me.key')

    with pytest.raises(ValidationError):
        TlsMaterial.from_directory('')


def test_client_conf_order():
    with ClientConf() as conf:
        conf.set('bootstrap.servers', 'b:1')
        conf.set('security.protocol', 'plaintext')
        conf.update({'linger.ms': 5, 'client.id': 'me'})
        assert conf.names() == ['bootstrap.servers', 'security.protocol', 'linger.ms', 'client.id']
        assert 'linger.ms' in conf
        assert len(conf) == 4


def test_client_conf_fail_fast():
    """The first rejected property stops all further properties."""
    with ClientConf() as conf:
        conf.set('bootstrap.servers', 'b:1')
        with pytest.raises(ConfigError) as ex:
            conf.update({'linger.ms': 5, 'bootstrap.servers': 'b:2', 'client.id': 'me'})
        assert ex.value.property == 'bootstrap.servers'
        assert ex.value.code == KafkaError._INVALID_ARG
        assert 'bootstrap.servers already set' in str(ex.value)
        assert conf.names() == ['bootstrap.servers', 'linger.ms']


def test_client_conf_values_pass_through():
    """Values are left for the client to validate when it is constructed."""
    with ClientConf() as conf:
        conf.set('ssl.ca.location', '/nonexistent/ca.crt')
        conf.set('acks', -1)
        conf.set('enable.partition.eof', True)
        conf.set('logger', librdkafka_logger)
        assert len(conf) == 4
        assert conf.take() == {'ssl.ca.location': '/nonexistent/ca.crt',
                               'acks': -1,
                               'enable.partition.eof': True,
                               'logger': librdkafka_logger}


def test_client_conf_duplicate():
    with ClientConf() as conf:
        conf.set('client.id', 'a')
        with pytest.raises(ConfigError, match='already set'):
            conf.set('client.id', 'b')


def test_client_conf_take():
    with ClientConf() as conf:
        conf.set('bootstrap.servers', 'b:1')
        data = conf.take()
        assert conf.transferred
        assert data == {'bootstrap.servers': 'b:1'}

        with pytest.raises(RuntimeError, match='already been transferred'):
            conf.take()
        with pytest.raises(RuntimeError):
            conf.set('client.id', 'me')

    # Releasing after transfer leaves the taken properties alone
    assert data == {'bootstrap.servers': 'b:1'}


def test_client_conf_release_on_error():
    conf = ClientConf()
    with pytest.raises(ConfigError):
        with conf:
            conf.set('bootstrap.servers', 'b:1')
            conf.set('bootstrap.servers', 'b:2')
    assert len(conf) == 0
    assert not conf.transferred

    with pytest.raises(RuntimeError, match='has been released'):
        conf.take()

    # release() is idempotent
    conf.release()
