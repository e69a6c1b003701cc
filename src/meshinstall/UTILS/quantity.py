# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Kubernetes resource quantity parsing.
Parses strings such as '100m', '1Gi', '5G' or '1.5e3' into exact decimal values.
"""

import re
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal, InvalidOperation

from pydantic_core import core_schema

from ..MODELS.errors import QuantityParseError


BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}

DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}

# Exponent is tried before the suffix so '1E' still means exa and '1E3' means 1000.
_QUANTITY_PATTERN = re.compile(
    r"(?P<number>[+-]?(?:\d+(?:\.\d*)?|\.\d+))"
    r"(?:(?P<exponent>[eE][+-]?\d+)|(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|[numkMGTPE]))?"
)


@dataclass(frozen=True)
class Quantity:
    """
    A parsed resource quantity.

    Examples:
        - 100m -> 0.1 (CPU cores)
        - 1Gi -> 1073741824 (bytes)
        - 5G -> 5000000000 (bytes)
    """

    text: str
    value: Decimal

    @classmethod
    def parse(cls, text: str) -> "Quantity":
        """
        Parse a quantity string.

        Args:
            text: Quantity string (e.g., '100m', '10Gi')

        Returns:
            Parsed Quantity object.

        Raises:
            QuantityParseError: If the string is not a valid quantity.
        """
        if not isinstance(text, str) or not text:
            raise QuantityParseError(str(text), "empty quantity")

        match = _QUANTITY_PATTERN.fullmatch(text)
        if match is None:
            raise QuantityParseError(text)

        try:
            number = Decimal(match.group("number"))
        except InvalidOperation as exc:
            raise QuantityParseError(text) from exc

        exponent = match.group("exponent")
        suffix = match.group("suffix") or ""
        if exponent:
            value = number.scaleb(int(exponent[1:]))
        elif suffix in BINARY_SUFFIXES:
            value = number * BINARY_SUFFIXES[suffix]
        else:
            value = number * DECIMAL_SUFFIXES[suffix]

        return cls(text=text, value=value)

    @property
    def milli_value(self) -> int:
        """Value in thousandths, rounded up, as used for CPU millicores."""
        return int((self.value * 1000).to_integral_value(rounding=ROUND_CEILING))

    def __int__(self) -> int:
        return int(self.value.to_integral_value(rounding=ROUND_CEILING))

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"Quantity({self.text})"

    @classmethod
    def __get_pydantic_core_schema__(cls, source, handler):
        # Accept either a Quantity or its string form, and dump back to the string form.
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _coerce(cls, value):
        if isinstance(value, cls):
            return value
        return cls.parse(value)
