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

from enum import Enum
from typing import Optional

from attrs import define as _attrs_define

from .error import ValidationError


class Role(Enum):
    """
    Enumerates the kinds of client handles.
    """
    PRODUCER = "producer"  #: Producer handle
    CONSUMER = "consumer"  #: Consumer handle


class OffsetPolicy(Enum):
    """
    Where a consumer group begins reading when it has no committed offset.
    """
    EARLIEST = "earliest"  #: Start from the oldest retained message
    LATEST = "latest"  #: Start after the newest message

    @classmethod
    def parse(cls, value) -> "OffsetPolicy":
        """
        Resolve ``value`` to an :py:class:`OffsetPolicy`.

        Args:
            value (OffsetPolicy|str|None): Policy or its name, ``None``
                selects :py:attr:`OffsetPolicy.LATEST`.

        Raises:
            ValidationError: if ``value`` names no known policy.
        """
        if value is None:
            return cls.LATEST
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError("Invalid offset policy %r, expected one of %s" %
                              (value, ", ".join(p.value for p in cls)))


@_attrs_define(frozen=True)
class Message:
    """
    A message read from a topic partition.

    The key and value are owned copies and remain valid after the consumer
    is closed.

    :ivar bytes key: Message key, or None
    :ivar bytes value: Message payload, or None
    :ivar str topic: Topic the message was read from
    :ivar int partition: Partition index
    :ivar int offset: Offset within the partition
    """
    key: Optional[bytes]
    value: Optional[bytes]
    topic: str
    partition: int
    offset: int

    def key_str(self) -> Optional[str]:
        return self.key.decode('utf-8') if self.key is not None else None

    def value_str(self) -> Optional[str]:
        return self.value.decode('utf-8') if self.value is not None else None


@_attrs_define(frozen=True)
class PartitionEOF:
    """
    Marks that the consumer has reached the end of a partition.

    This is not a message, keep polling to receive messages produced later.
    """
    topic: str
    partition: int
    offset: int


@_attrs_define(frozen=True)
class DeliveryReceipt:
    """
    Where a successfully sent message was stored.
    """
    partition: int
    offset: int
