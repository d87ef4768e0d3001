"""Angle normalization, clipping and unit conversions, plus polynomials."""

import math

TAU = 2.0 * math.pi
RAD_PER_HR = TAU / 24.0

_SEC_PER_DEG = 3600.0
_MIN_PER_DEG = 60.0


def check_argument(condition: bool, message: str = "condition not satisfied") -> None:
    """Raise ValueError unless condition holds."""
    if not condition:
        raise ValueError(message)


def check_in_interval(interval: "ClosedInterval | RightOpenInterval", value: float) -> float:
    """Return value unchanged if it lies in interval.

    Raises:
        ValueError: If value is outside the interval.
    """
    if not interval.contains(value):
        raise ValueError(f"value out of bounds: {value} not in {interval}")
    return value


class _Interval:
    __slots__ = ("_low", "_high")

    def __init__(self, low: float, high: float):
        self._low = float(low)
        self._high = float(high)

    @property
    def low(self) -> float:
        return self._low

    @property
    def high(self) -> float:
        return self._high

    @property
    def size(self) -> float:
        return self._high - self._low

    def contains(self, value: float) -> bool:
        raise NotImplementedError

    def __contains__(self, value: float) -> bool:
        return self.contains(value)


class ClosedInterval(_Interval):
    """Interval [low, high], both bounds included."""

    __slots__ = ()

    @classmethod
    def of(cls, low: float, high: float) -> "ClosedInterval":
        check_argument(low < high, f"empty interval: low={low} >= high={high}")
        return cls(low, high)

    @classmethod
    def symmetric(cls, size: float) -> "ClosedInterval":
        """Closed interval of the given size centred on 0."""
        check_argument(size > 0, f"interval size must be positive, got {size}")
        return cls.of(-size / 2.0, size / 2.0)

    def contains(self, value: float) -> bool:
        return self._low <= value <= self._high

    def clip(self, value: float) -> float:
        """Saturate value at the bounds of the interval."""
        if value >= self._high:
            return self._high
        if value <= self._low:
            return self._low
        return value

    def __str__(self) -> str:
        return f"[{self._low},{self._high}]"


class RightOpenInterval(_Interval):
    """Interval [low, high), low included, high excluded."""

    __slots__ = ()

    @classmethod
    def of(cls, low: float, high: float) -> "RightOpenInterval":
        check_argument(low < high, f"empty interval: low={low} >= high={high}")
        return cls(low, high)

    @classmethod
    def symmetric(cls, size: float) -> "RightOpenInterval":
        """Right-open interval of the given size centred on 0."""
        check_argument(size > 0, f"interval size must be positive, got {size}")
        return cls.of(-size / 2.0, size / 2.0)

    def contains(self, value: float) -> bool:
        return self._low <= value < self._high

    def reduce(self, value: float) -> float:
        """Wrap value into the interval: low + floor_mod(value - low, size).

        The result always lies in [low, high), including for values a rounding
        error below a multiple of the size.
        """
        size = self.size
        shifted = value - self._low
        reduced = self._low + (shifted - size * math.floor(shifted / size))
        if reduced >= self._high or reduced < self._low:
            return self._low
        return reduced

    def __str__(self) -> str:
        return f"[{self._low},{self._high}["


_NORMALIZED = RightOpenInterval.of(0.0, TAU)
_MIN_SEC = RightOpenInterval.of(0.0, 60.0)


def normalize_positive(rad: float) -> float:
    """Reduce an angle in radians into [0, 2π)."""
    return _NORMALIZED.reduce(rad)


def of_arcsec(sec: float) -> float:
    return math.radians(sec / _SEC_PER_DEG)


def of_dms(deg: int, minutes: int, sec: float) -> float:
    """Convert degrees, arcminutes and arcseconds to radians.

    Args:
        deg: Whole degrees, non-negative.
        minutes: Arcminutes in [0, 60).
        sec: Arcseconds in [0, 60).

    Raises:
        ValueError: If any component is out of range.
    """
    check_argument(deg >= 0, f"degrees must be non-negative, got {deg}")
    check_in_interval(_MIN_SEC, minutes)
    check_in_interval(_MIN_SEC, sec)
    return of_deg(deg + minutes / _MIN_PER_DEG + sec / _SEC_PER_DEG)


def of_deg(deg: float) -> float:
    return math.radians(deg)


def to_deg(rad: float) -> float:
    return math.degrees(rad)


def of_hr(hr: float) -> float:
    return hr * RAD_PER_HR


def to_hr(rad: float) -> float:
    return rad / RAD_PER_HR


class Polynomial:
    """Polynomial with non-negative integer exponents, dominant coefficient first."""

    __slots__ = ("_coefficients",)

    def __init__(self, coefficients: tuple[float, ...]):
        self._coefficients = coefficients

    @classmethod
    def of(cls, dominant: float, *rest: float) -> "Polynomial":
        check_argument(dominant != 0, "dominant coefficient must be non-zero")
        return cls((float(dominant),) + tuple(float(c) for c in rest))

    def at(self, x: float) -> float:
        """Evaluate with Horner's scheme."""
        result = 0.0
        for c in self._coefficients[:-1]:
            result = (result + c) * x
        return result + self._coefficients[-1]

    def __eq__(self, other: object) -> bool:
        raise TypeError("Polynomial does not support equality")

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        degree = len(self._coefficients) - 1
        parts: list[str] = []
        for i, c in enumerate(self._coefficients):
            if c == 0:
                continue
            power = degree - i
            if abs(c) == 1.0 and power != 0:
                coeff = "-" if c < 0 else ""
            else:
                coeff = repr(c)
            term = coeff
            if power >= 1:
                term += "x"
            if power > 1:
                term += f"^{power}"
            if parts and not term.startswith("-"):
                term = "+" + term
            parts.append(term)
        return "".join(parts) or "0"
