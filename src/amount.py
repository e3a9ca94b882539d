import re
from dataclasses import dataclass
from functools import total_ordering

SCALE = 10_000
DECIMAL_PLACES = 4
MAX_UNITS = 2**64 - 1
_MAX_WHOLE_DIGITS = len(str(MAX_UNITS // SCALE))

_AMOUNT_PATTERN = re.compile(r"^(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?$")


class AmountError(ArithmeticError):
    """Base error for amount parsing and checked arithmetic."""


class AmountParseError(AmountError, ValueError):
    pass


class AmountOverflowError(AmountError):
    pass


class AmountUnderflowError(AmountError):
    pass


@total_ordering
@dataclass(frozen=True)
class Amount:
    """
    Non-negative fixed-point monetary value with four decimal places.
    Stored as an integer number of units, one unit being 0.0001.
    """

    units: int = 0

    def __post_init__(self):
        if not 0 <= self.units <= MAX_UNITS:
            raise AmountOverflowError(f"{self.units} units outside [0, {MAX_UNITS}]")

    @classmethod
    def zero(cls) -> "Amount":
        return cls(0)

    @classmethod
    def from_units(cls, units: int) -> "Amount":
        return cls(units)

    @classmethod
    def parse(cls, text: str) -> "Amount":
        """
        Parse a decimal string such as "1", "1.5", ".25" or "10.0000".

        Raises:
            AmountParseError: malformed text, sign, exponent or more than four fractional digits
            AmountOverflowError: value larger than the representable maximum
        """
        match = _AMOUNT_PATTERN.match(text.strip())
        if match is None:
            raise AmountParseError(f"Malformed amount: {text!r}")

        whole = match.group("whole")
        fraction = match.group("fraction") or ""
        if not whole and not fraction:
            raise AmountParseError(f"Malformed amount: {text!r}")
        if len(fraction) > DECIMAL_PLACES:
            raise AmountParseError(f"Amount {text!r} has more than {DECIMAL_PLACES} decimal places")
        if len(whole.lstrip("0")) > _MAX_WHOLE_DIGITS:
            raise AmountOverflowError(f"Amount {text!r} exceeds the maximum")

        units = int(whole.lstrip("0") or "0") * SCALE + int(fraction.ljust(DECIMAL_PLACES, "0"))
        return cls(units)

    def format(self) -> str:
        whole, fraction = divmod(self.units, SCALE)
        return f"{whole}.{fraction:0{DECIMAL_PLACES}d}"

    def checked_add(self, other: "Amount") -> "Amount":
        result = self.units + other.units
        if result > MAX_UNITS:
            raise AmountOverflowError(f"{self} + {other} exceeds the maximum balance")
        return Amount(result)

    def checked_sub(self, other: "Amount") -> "Amount":
        result = self.units - other.units
        if result < 0:
            raise AmountUnderflowError(f"{self} - {other} would be negative")
        return Amount(result)

    def is_zero(self) -> bool:
        return self.units == 0

    def __lt__(self, other: "Amount") -> bool:
        if not isinstance(other, Amount):
            return NotImplemented
        return self.units < other.units

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Amount({self.format()})"


MAX_AMOUNT = Amount(MAX_UNITS)
