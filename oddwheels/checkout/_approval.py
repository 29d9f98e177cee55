"""
Approval — loyalty tiers and the post-checkout approval hook.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Protocol

from oddwheels.checkout._orders import OrderRepository
from oddwheels.checkout._types import Order, OrderStatus

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Tiers
# ═══════════════════════════════════════════════════════════════════════════════


class Tier(StrEnum):
    CLASSIC = "CLASSIC"
    SILVER = "SILVER"
    GOLD = "GOLD"
    PLATINUM = "PLATINUM"


@dataclass(frozen=True, slots=True)
class TierPerks:
    label: str
    threshold: int
    monthly_vouchers: tuple[str, ...] = ()
    auto_approve: bool = False
    priority_shipping: bool = False
    enhanced_tracking: bool = False


TIER_PERKS = MappingProxyType({
    Tier.CLASSIC: TierPerks("Classic", 0),
    Tier.SILVER: TierPerks("Silver", 2000, ("FS100",)),
    Tier.GOLD: TierPerks("Gold", 5000, ("FS100", "FS200"), auto_approve=True),
    Tier.PLATINUM: TierPerks(
        "Platinum",
        10000,
        ("FS100", "FS200", "FS300"),
        auto_approve=True,
        priority_shipping=True,
        enhanced_tracking=True,
    ),
})

_ORDERED = tuple(Tier)


def _normalize_spend(spend: float) -> float:
    return max(0.0, spend) if math.isfinite(spend) else 0.0


def tier_from_spend(spend: float) -> Tier:
    total = _normalize_spend(spend)
    for tier in reversed(_ORDERED):
        if total >= TIER_PERKS[tier].threshold:
            return tier
    return Tier.CLASSIC


@dataclass(frozen=True, slots=True)
class TierProgress:
    tier: Tier
    next_tier: Tier | None
    current_min: int
    next_min: int | None
    progress: float
    remaining: float
    spend: float


def tier_progress(spend: float) -> TierProgress:
    """Where spend sits between the current tier and the next."""
    total = _normalize_spend(spend)
    tier = tier_from_spend(total)
    index = _ORDERED.index(tier)
    next_tier = _ORDERED[index + 1] if index + 1 < len(_ORDERED) else None

    current_min = TIER_PERKS[tier].threshold
    next_min = TIER_PERKS[next_tier].threshold if next_tier else None
    if next_min is not None and next_min > current_min:
        progress = min(1.0, max(0.0, (total - current_min) / (next_min - current_min)))
    else:
        progress = 1.0

    return TierProgress(
        tier=tier,
        next_tier=next_tier,
        current_min=current_min,
        next_min=next_min,
        progress=progress,
        remaining=max(0.0, next_min - total) if next_min is not None else 0.0,
        spend=total,
    )


def is_auto_approve_tier(tier: Tier | None) -> bool:
    return tier is not None and TIER_PERKS[tier].auto_approve


# ═══════════════════════════════════════════════════════════════════════════════
# Approval Hook
# ═══════════════════════════════════════════════════════════════════════════════


class ApprovalHook(Protocol):
    """
    Runs after an order is persisted.

    Returns the order's new status, or None to leave it pending. The
    reconciler logs and ignores any exception.
    """

    async def evaluate(self, order: Order) -> OrderStatus | None: ...


class TierAutoApproval:
    """Approve new orders of owners whose paid spend earns auto-approval."""

    def __init__(self, orders: OrderRepository) -> None:
        self._orders = orders

    async def evaluate(self, order: Order) -> OrderStatus | None:
        tier = tier_from_spend(await self._orders.paid_spend(order.owner))
        if not is_auto_approve_tier(tier):
            return None

        await self._orders.set_status(order.id, OrderStatus.APPROVED)
        logger.info("Order %s auto-approved for %s tier", order.id, tier.value)
        return OrderStatus.APPROVED


__all__ = (
    "Tier",
    "TierPerks",
    "TIER_PERKS",
    "tier_from_spend",
    "TierProgress",
    "tier_progress",
    "is_auto_approve_tier",
    "ApprovalHook",
    "TierAutoApproval",
)
