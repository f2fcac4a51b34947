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
Connection configuration and the ordered property set applied when a
client handle is created.
"""
import os
from typing import Any, Dict, List, Optional, Tuple, Union

from attrs import define as _attrs_define
from attrs import field as _attrs_field

from ._model import OffsetPolicy, Role
from ._util import ValidationUtil
from .error import ConfigError, ValidationError

BOOTSTRAP_SERVERS = 'bootstrap.servers'
GROUP_ID = 'group.id'
SECURITY_PROTOCOL = 'security.protocol'
SSL_CA_LOCATION = 'ssl.ca.location'
SSL_CERTIFICATE_LOCATION = 'ssl.certificate.location'
SSL_KEY_LOCATION = 'ssl.key.location'
AUTO_OFFSET_RESET = 'auto.offset.reset'
ACKS = 'acks'
ENABLE_PARTITION_EOF = 'enable.partition.eof'
LOGGER = 'logger'


@_attrs_define(frozen=True)
class TlsMaterial:
    """
    Paths to the PEM files used for mutual TLS.

    :ivar str ca_location: CA certificate used to verify the broker
    :ivar str certificate_location: Client certificate
    :ivar str key_location: Client private key
    """
    ca_location: str
    certificate_location: str
    key_location: str

    @classmethod
    def from_directory(cls, path: str, ca: str = 'ca.crt',
                       certificate: str = 'client.crt',
                       key: str = 'client.key') -> "TlsMaterial":
        """
        Locate the three TLS files inside a single directory.

        Args:
            path (str): Directory holding the files.

            ca (str): CA certificate file name.

            certificate (str): Client certificate file name.

            key (str): Client private key file name.
        """
        ValidationUtil.check_non_empty_string(path, "path")
        return cls(os.path.join(path, ca),
                   os.path.join(path, certificate),
                   os.path.join(path, key))


def _split_servers(bootstrap_servers) -> Tuple[str, ...]:
    if isinstance(bootstrap_servers, str):
        servers = bootstrap_servers.split(',')
    elif isinstance(bootstrap_servers, (list, tuple)):
        servers = list(bootstrap_servers)
    elif bootstrap_servers is None:
        servers = []
    else:
        raise ValidationError("Expected bootstrap_servers to be a list or a comma-separated string")

    result = []
    for server in servers:
        if not isinstance(server, str):
            raise ValidationError("Expected bootstrap server entries to be strings")
        server = server.strip()
        if len(server) == 0:
            raise ValidationError("Bootstrap server entries cannot be empty")
        result.append(server)

    if len(result) == 0:
        raise ValidationError("Brokers cannot be empty")
    return tuple(result)


def _tls_from_parts(ca_location, certificate_location, key_location) -> Optional[TlsMaterial]:
    parts = {
        'ca_location': ca_location,
        'certificate_location': certificate_location,
        'key_location': key_location,
    }
    present = [name for name, value in parts.items() if value is not None and value != '']
    if len(present) == 0:
        return None
    if len(present) != len(parts):
        missing = [name for name in parts if name not in present]
        raise ValidationError("Certificate paths must be provided together, missing: %s" %
                              ", ".join(missing))
    for name, value in parts.items():
        ValidationUtil.check_non_empty_string(value, name)
    return TlsMaterial(ca_location, certificate_location, key_location)


@_attrs_define(frozen=True)
class ConnectionConfig:
    """
    Validated settings for creating a :py:class:`Producer` or
    :py:class:`Consumer`.

    Instances are immutable and are not retained by the handle created
    from them. Use :py:meth:`ConnectionConfig.build` or
    :py:meth:`ConnectionConfig.from_dict` rather than the constructor.

    :ivar tuple bootstrap_servers: Broker endpoints, ``host:port``
    :ivar str group_id: Consumer group, or None
    :ivar TlsMaterial tls: mTLS material, or None for plaintext
    :ivar OffsetPolicy offset_policy: Reset policy when no committed offset exists
    :ivar dict properties: Extra librdkafka properties applied after the managed ones
    """
    bootstrap_servers: Tuple[str, ...]
    group_id: Optional[str] = None
    tls: Optional[TlsMaterial] = None
    offset_policy: OffsetPolicy = OffsetPolicy.LATEST
    properties: Dict[str, Any] = _attrs_field(factory=dict, hash=False)

    @classmethod
    def build(cls, bootstrap_servers: Union[str, List[str], Tuple[str, ...]],
              group_id: Optional[str] = None,
              ca_location: Optional[str] = None,
              certificate_location: Optional[str] = None,
              key_location: Optional[str] = None,
              offset_policy: Union[OffsetPolicy, str, None] = None,
              role: Optional[Role] = None,
              properties: Optional[Dict[str, Any]] = None) -> "ConnectionConfig":
        """
        Validate the arguments and build a configuration.

        This performs no I/O, certificate paths are only checked once a
        handle is created.

        Args:
            bootstrap_servers (list|str): Broker endpoints, either a list of
                ``host:port`` or a comma-separated string.

            group_id (str, optional): Consumer group, required when ``role``
                is :py:attr:`Role.CONSUMER`.

            ca_location (str, optional): CA certificate path.

            certificate_location (str, optional): Client certificate path.

            key_location (str, optional): Client private key path.

            offset_policy (OffsetPolicy|str, optional): ``earliest`` or
                ``latest`` (default).

            role (Role, optional): Intended handle role, enables the role
                specific checks.

            properties (dict, optional): Extra librdkafka properties.

        Raises:
            ValidationError: when endpoints are empty, a consumer lacks a
                group id, the TLS paths are only partially given or the
                offset policy is unknown.
        """
        servers = _split_servers(bootstrap_servers)
        group_id = ValidationUtil.check_optional_non_empty_string(group_id, "group_id")
        tls = _tls_from_parts(ca_location, certificate_location, key_location)
        policy = OffsetPolicy.parse(offset_policy)

        if properties is None:
            properties = {}
        elif not isinstance(properties, dict):
            raise ValidationError("Expected properties to be a dict")

        conf = cls(servers, group_id, tls, policy, dict(properties))
        if role is not None:
            conf.validate_for(role)
        return conf

    @classmethod
    def from_dict(cls, conf: Dict[str, Any], role: Optional[Role] = None) -> "ConnectionConfig":
        """
        Build from a librdkafka style configuration dict.

        The managed keys (``bootstrap.servers``, ``group.id``,
        ``ssl.ca.location``, ``ssl.certificate.location``,
        ``ssl.key.location`` and ``auto.offset.reset``) are extracted, all
        remaining keys are passed through to librdkafka untouched.
        ``security.protocol`` and ``acks`` are managed by the handles and
        may not be given.

        The source dict is not modified.
        """
        if not isinstance(conf, dict):
            raise ValidationError("Expected configuration dict")

        # shallow copy to keep referenced types in tact
        _conf = conf.copy()
        for managed in (SECURITY_PROTOCOL, ACKS):
            if managed in _conf:
                raise ValidationError("%s is managed by kafka_bridge and cannot be set" % (managed,))

        return cls.build(_conf.pop(BOOTSTRAP_SERVERS, None),
                         group_id=_conf.pop(GROUP_ID, None),
                         ca_location=_conf.pop(SSL_CA_LOCATION, None),
                         certificate_location=_conf.pop(SSL_CERTIFICATE_LOCATION, None),
                         key_location=_conf.pop(SSL_KEY_LOCATION, None),
                         offset_policy=_conf.pop(AUTO_OFFSET_RESET, None),
                         role=role,
                         properties=_conf)

    def validate_for(self, role: Role) -> None:
        """
        Raises:
            ValidationError: if this configuration cannot create a handle of ``role``.
        """
        if role is Role.CONSUMER and self.group_id is None:
            raise ValidationError("Group ID cannot be null")

    @property
    def secured(self) -> bool:
        return self.tls is not None


class ClientConf(object):
    """
    Ordered set of client properties with a single owner.

    Properties are applied one at a time with :py:meth:`ClientConf.set`,
    a property set twice raises :py:class:`ConfigError` and nothing after it
    is applied. Values are validated by the client when it is constructed,
    which rejects properties in the order they were set. The accumulated
    properties are handed to the constructing client exactly once with
    :py:meth:`ClientConf.take`; until then the set is released on every
    exit path when used as a context manager.

    Example:
        with ClientConf() as conf:
            conf.set('bootstrap.servers', 'broker:9093')
            client = Producer(conf.take())
    """
    __slots__ = ['_data', '_transferred', '_released']

    def __init__(self):
        self._data = {}
        self._transferred = False
        self._released = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, exc_traceback):
        self.release()

    def __contains__(self, name):
        return name in self._data

    def __len__(self):
        return len(self._data)

    def _check_owned(self):
        if self._transferred:
            raise RuntimeError("Configuration has already been transferred")
        if self._released:
            raise RuntimeError("Configuration has been released")

    def set(self, name: str, value: Any) -> None:
        """
        Apply a single property.

        Raises:
            ConfigError: if the property is already set.
        """
        self._check_owned()
        if name in self._data:
            raise ConfigError(name, "Property %s already set" % (name,))
        self._data[name] = value

    def update(self, properties: Dict[str, Any]) -> None:
        """Apply ``properties`` in iteration order, see :py:meth:`ClientConf.set`."""
        for name, value in properties.items():
            self.set(name, value)

    def names(self) -> List[str]:
        return list(self._data.keys())

    def take(self) -> Dict[str, Any]:
        """
        Transfer the accumulated properties to the caller.

        After this call the set no longer owns the properties and
        :py:meth:`ClientConf.release` does nothing.

        Raises:
            RuntimeError: if the properties were already transferred or released.
        """
        self._check_owned()
        self._transferred = True
        data, self._data = self._data, {}
        return data

    def release(self) -> None:
        """Discard the properties unless they have been transferred."""
        if self._transferred or self._released:
            return
        self._released = True
        self._data.clear()

    @property
    def transferred(self) -> bool:
        return self._transferred
