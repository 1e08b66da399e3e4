"""Decimal parsing boundary and money formatting."""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext, localcontext
from typing import Any, Optional

from .errors import ParseError

# Period as decimal separator, optional exponent. No grouping characters.
DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# At most this many digits on either side of the decimal point
MAX_INTEGER_DIGITS = 40
MAX_FRACTION_DIGITS = 40


def parse_decimal(raw: Any, field: str, line: Optional[int] = None) -> Decimal:
    """
    Parse a wire-format decimal string into a Decimal.

    Ints are accepted since they are exact. Floats, bools and anything that
    does not match the wire grammar raise ParseError, as do values with
    more than MAX_INTEGER_DIGITS integer or MAX_FRACTION_DIGITS fractional
    digits.
    """
    if isinstance(raw, bool) or raw is None:
        raise ParseError(field, raw, line)
    if isinstance(raw, int):
        value = Decimal(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not DECIMAL_PATTERN.match(text):
            raise ParseError(field, raw, line)
        try:
            value = Decimal(text)
        except InvalidOperation:
            raise ParseError(field, raw, line) from None
    else:
        raise ParseError(field, raw, line)

    if not value.is_finite():
        raise ParseError(field, raw, line)
    if value.adjusted() >= MAX_INTEGER_DIGITS or value.as_tuple().exponent < -MAX_FRACTION_DIGITS:
        raise ParseError(field, raw, line)
    return value


def format_plain(value: Decimal) -> str:
    """Plain positional text for a quantity or percentage, e.g. Decimal("1E+1") -> "10"."""
    return format(value, "f")


@dataclass
class MoneyFormat:
    """Currency formatting options; %s is the symbol, %v the number."""
    symbol: str = "€ "
    precision: int = 2
    thousand: str = " "
    decimal: str = "."
    format: str = "%s%v"
    format_negative: str = "%s-%v"
    format_zero: Optional[str] = None

    def quantize(self, value: Decimal) -> Decimal:
        """Quantize to the configured precision, with enough context digits for any magnitude."""
        quantum = Decimal(1).scaleb(-self.precision)
        with localcontext() as ctx:
            ctx.prec = max(getcontext().prec, value.adjusted() + self.precision + 2)
            return value.quantize(quantum, rounding=ROUND_HALF_UP)

    def format_number(self, value: Decimal) -> str:
        """Group and quantize the absolute value without the symbol."""
        text = format(self.quantize(value).copy_abs(), "f")
        if "." in text:
            int_part, frac_part = text.split(".")
        else:
            int_part, frac_part = text, ""

        groups = []
        while len(int_part) > 3:
            groups.insert(0, int_part[-3:])
            int_part = int_part[:-3]
        groups.insert(0, int_part)

        number = self.thousand.join(groups)
        if frac_part:
            number = f"{number}{self.decimal}{frac_part}"
        return number

    def format_money_decimal(self, value: Decimal) -> str:
        """Format a Decimal as a currency string."""
        number = self.format_number(value)
        rounded = self.quantize(value)

        if rounded < 0:
            template = self.format_negative
        elif rounded == 0 and self.format_zero:
            template = self.format_zero
        else:
            template = self.format
        return template.replace("%s", self.symbol).replace("%v", number)
