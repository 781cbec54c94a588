"""
Shared primitives for the calculator formulas.

Input metadata mirrors the slider bounds each calculator exposes so that
prefilled values can be resolved and clamped before a formula runs.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional


class CalculatorInputError(ValueError):
    """Raised when a calculator receives a value that is not a number."""


@dataclass(frozen=True, slots=True)
class PrefillSource:
    """A prefill key and the factor applied to its value."""

    key: str
    factor: float = 1.0


@dataclass(frozen=True, slots=True)
class InputField:
    """Describe one numeric calculator input."""

    key: str
    label: str
    default: float
    min: float
    max: float
    step: float
    sources: tuple[PrefillSource, ...] = ()

    @property
    def param(self) -> str:
        """Keyword argument name used by the formula function."""
        return _CAMEL_BOUNDARY.sub("_", self.key).lower()

    def clamp(self, value: float) -> float:
        return min(max(value, self.min), self.max)

    def lookup_order(self) -> tuple[PrefillSource, ...]:
        """Prefill sources in priority order, the field's own key last."""
        if any(source.key == self.key for source in self.sources):
            return self.sources
        return (*self.sources, PrefillSource(self.key))


_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def source(key: str, factor: float = 1.0) -> PrefillSource:
    return PrefillSource(key=key, factor=factor)


def coerce_number(key: str, value: Any) -> float:
    """Convert a prefill or override value into a finite float."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CalculatorInputError(f"Input '{key}' must be a number, got {value!r}.")
    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise CalculatorInputError(f"Input '{key}' must be a finite number.")
    return number


def resolve_inputs(
    fields: tuple[InputField, ...],
    prefill: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> dict[str, float]:
    """
    Build the keyed input values for a calculator.

    Each field takes the first prefill source present, falls back to its
    default, then applies any override addressed by the field's own key.
    Every value is clamped to the field bounds.
    """
    prefill = prefill or {}
    overrides = overrides or {}
    values: dict[str, float] = {}
    for item in fields:
        value = item.default
        for candidate in item.lookup_order():
            raw = prefill.get(candidate.key)
            if raw is None:
                continue
            value = coerce_number(candidate.key, raw) * candidate.factor
            break
        if overrides.get(item.key) is not None:
            value = coerce_number(item.key, overrides[item.key])
        values[item.key] = item.clamp(value)
    return values


def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    """Divide, returning ``None`` when the denominator is zero."""
    if denominator == 0:
        return None
    return numerator / denominator


def capped_percent(part: float, whole: Optional[float], cap: float = 100.0) -> Optional[float]:
    """Percentage of ``part`` over ``whole`` capped at ``cap``.

    A zero target is already met, so any non-negative part reports the cap.
    """
    if whole is None:
        return None
    if whole == 0:
        return cap if part >= 0 else 0.0
    return min(part / whole * 100, cap)


def amortized_payment(principal: float, monthly_rate: float, months: int) -> float:
    """Level monthly payment that repays ``principal`` over ``months``."""
    if principal <= 0 or months <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / months
    growth = (1 + monthly_rate) ** months
    return principal * monthly_rate * growth / (growth - 1)


__all__ = [
    "CalculatorInputError",
    "InputField",
    "PrefillSource",
    "amortized_payment",
    "capped_percent",
    "coerce_number",
    "resolve_inputs",
    "safe_divide",
    "source",
]
