"""
Effective price resolution.

Sale price beats percent discount. Must be used for every displayed and
totaled price so checkout matches what the shopper last saw.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class SaleResolution:
    effective_price: int | float
    has_sale: bool


@dataclass(frozen=True, slots=True)
class PriceRange:
    min: int | float
    max: int | float
    has_sale: bool


class Priced(Protocol):
    @property
    def price(self) -> int | float: ...
    @property
    def sale_price(self) -> int | float | None: ...
    @property
    def discount_percent(self) -> float | None: ...


def _finite(value: float | int | None) -> float | int | None:
    """The value itself when it is a finite number, ints kept as ints."""
    if value is None:
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(n):
        return None
    return value if isinstance(value, int) and not isinstance(value, bool) else n


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def resolve_effective_price(
    price: int | float | None,
    sale_price: int | float | None = None,
    discount_percent: float | None = None,
) -> SaleResolution:
    """
    Resolve the single unit price a shopper pays.

    Example:
        resolve_effective_price(1000, discount_percent=20)   # 800, sale
        resolve_effective_price(1000, 750, 20)               # 750, sale
    """
    base = _finite(price) or 0

    sale = _finite(sale_price)
    if sale is not None and 0 < sale < base:
        return SaleResolution(sale, True)

    pct = _finite(discount_percent)
    if pct is not None and pct > 0:
        pct = min(pct, 100.0)
        # rounding a fractional price may land above it
        discounted = min(base, max(0, round_half_up(base * (1 - pct / 100))))
        return SaleResolution(discounted, discounted < base)

    return SaleResolution(base, False)


def option_pricing(option: Priced) -> SaleResolution:
    return resolve_effective_price(
        option.price, option.sale_price, option.discount_percent
    )


def effective_range(options: Iterable[Priced]) -> PriceRange:
    """Lowest and highest effective price across a product's options."""
    resolved = [option_pricing(o) for o in options]
    if not resolved:
        return PriceRange(0, 0, False)
    prices = [r.effective_price for r in resolved]
    return PriceRange(min(prices), max(prices), any(r.has_sale for r in resolved))


__all__ = (
    "SaleResolution",
    "PriceRange",
    "Priced",
    "round_half_up",
    "resolve_effective_price",
    "option_pricing",
    "effective_range",
)
