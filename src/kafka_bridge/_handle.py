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
import re
from typing import Any, Callable, Dict, Optional

from confluent_kafka import KafkaException

from ._log import librdkafka_logger
from ._model import Role
from .config import (BOOTSTRAP_SERVERS,
                     LOGGER,
                     SECURITY_PROTOCOL,
                     SSL_CA_LOCATION,
                     SSL_CERTIFICATE_LOCATION,
                     SSL_KEY_LOCATION,
                     ClientConf,
                     ConnectionConfig)
from .error import ClientConnectionError, ConfigError, ValidationError

logger = logging.getLogger(__name__)

# Prefix used by confluent-kafka when rd_kafka_new() itself fails, as
# opposed to a rejected property.
_CREATE_FAILED_PREFIX = 'Failed to create'

# librdkafka names the rejected property in double quotes, e.g.
# No such configuration property: "foo" or
# Invalid value "x" for configuration property "acks"
_PROPERTY_RE = re.compile(r'property:? "([^"]+)"')


def apply_security(conf: ClientConf, config: ConnectionConfig) -> None:
    """Apply the security protocol followed by the TLS trio, if any."""
    if config.tls is None:
        conf.set(SECURITY_PROTOCOL, 'plaintext')
        return
    conf.set(SECURITY_PROTOCOL, 'ssl')
    conf.set(SSL_CA_LOCATION, config.tls.ca_location)
    conf.set(SSL_CERTIFICATE_LOCATION, config.tls.certificate_location)
    conf.set(SSL_KEY_LOCATION, config.tls.key_location)


def apply_diagnostics(conf: ClientConf) -> None:
    conf.set(LOGGER, librdkafka_logger)


def _rejected_property(reason: str) -> Optional[str]:
    match = _PROPERTY_RE.search(reason)
    return match.group(1) if match else None


class ClientHandle(object):
    """
    Owns exactly one confluent-kafka client instance.

    The instance is never touched again once the handle has been closed,
    every operation raises :py:class:`ValidationError` instead.

    Closing a handle while another thread is using it is not supported,
    callers must serialize the handle's lifecycle against in-flight
    operations.
    """
    role = None  # type: Role

    def __init__(self, config: ConnectionConfig) -> None:
        if not isinstance(config, ConnectionConfig):
            raise ValidationError("Expected a ConnectionConfig")
        config.validate_for(self.role)
        self._impl = None
        self._closed = False
        self._impl = self._create(config)
        logger.info("Created %s for %s (%s)", self.role.value,
                    ",".join(config.bootstrap_servers),
                    "mTLS" if config.secured else "plaintext")

    def _configure(self, conf: ClientConf, config: ConnectionConfig) -> None:
        raise NotImplementedError

    def _factory(self) -> Callable[[Dict[str, Any]], Any]:
        raise NotImplementedError

    def _create(self, config: ConnectionConfig) -> Any:
        with ClientConf() as conf:
            # ConfigError propagates, the context releases what was applied
            self._configure(conf, config)
            factory = self._factory()
            try:
                return factory(conf.take())
            except KafkaException as e:
                err = e.args[0]
                reason = err.str()
                if reason.startswith(_CREATE_FAILED_PREFIX):
                    raise ClientConnectionError(err)
                raise ConfigError(_rejected_property(reason), reason)
            except (TypeError, ValueError) as e:
                raise ConfigError(None, str(e))

    def _native(self) -> Any:
        if self._closed:
            raise ValidationError("%s handle has been closed" % (self.role.value.capitalize(),))
        return self._impl

    def _release(self) -> Any:
        """Mark the handle closed and hand back the client for teardown."""
        impl, self._impl = self._impl, None
        self._closed = True
        return impl

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self):
        return "<%s %s>" % (self.__class__.__name__, "closed" if self._closed else "open")
