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

from typing import Any, Optional, Union

from ..error import ValidationError


class ValidationUtil:
    @staticmethod
    def check_non_empty_string(value: Any, param: str) -> str:
        if not isinstance(value, str):
            raise ValidationError("Expected %s to be a string" % (param,))
        if len(value.strip()) == 0:
            raise ValidationError("%s cannot be empty" % (param,))
        return value

    @staticmethod
    def check_optional_non_empty_string(value: Any, param: str) -> Optional[str]:
        if value is None:
            return None
        return ValidationUtil.check_non_empty_string(value, param)

    @staticmethod
    def check_non_negative_int(value: Any, param: str) -> int:
        # bool is an int subclass, refuse it explicitly
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Expected %s to be an int" % (param,))
        if value < 0:
            raise ValidationError("%s must be >= 0" % (param,))
        return value

    @staticmethod
    def check_int(value: Any, param: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError("Expected %s to be an int" % (param,))
        return value

    @staticmethod
    def to_bytes(value: Union[str, bytes, bytearray, memoryview, None], param: str) -> Optional[bytes]:
        """Copy ``value`` into an owned bytes object, encoding str as UTF-8."""
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode('utf-8')
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise ValidationError("Expected %s to be bytes or str" % (param,))

    @staticmethod
    def check_timeout(value: Any, param: str = "timeout") -> Optional[float]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError("Expected %s to be a number" % (param,))
        if value < 0:
            raise ValidationError("%s must be >= 0" % (param,))
        return float(value)
