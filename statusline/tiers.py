"""Usage tiers: percentage bands that drive bar color and message choice."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


PLACEHOLDER_MESSAGE = "loading..."


class UsageTier(str, Enum):
    """Ordered usage bands, lowest first."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Inclusive upper bound of each tier, checked in order
TIER_BOUNDS: tuple[tuple[int, UsageTier], ...] = (
    (20, UsageTier.VERY_LOW),
    (40, UsageTier.LOW),
    (60, UsageTier.MEDIUM),
    (80, UsageTier.HIGH),
    (100, UsageTier.CRITICAL),
)


def clamp_percent(percent: int) -> int:
    """Pin a percentage into [0, 100]."""
    return max(0, min(100, percent))


def usage_percent(usage: int, capacity: int) -> int:
    """Whole percentage of capacity used, truncated and clamped.

    A non-positive capacity reads as 0% instead of dividing by zero.
    """
    if capacity <= 0 or usage <= 0:
        return 0
    return clamp_percent(usage * 100 // capacity)


def classify(percent: int) -> UsageTier:
    """Map an already-clamped percentage to its tier."""
    for upper, tier in TIER_BOUNDS:
        if percent <= upper:
            return tier
    return UsageTier.CRITICAL


@dataclass(frozen=True)
class MessagePools:
    """One read-only list of short messages per tier."""

    very_low: tuple[str, ...] = ()
    low: tuple[str, ...] = ()
    medium: tuple[str, ...] = ()
    high: tuple[str, ...] = ()
    critical: tuple[str, ...] = ()

    def for_tier(self, tier: UsageTier) -> tuple[str, ...]:
        return getattr(self, tier.value)


def select_message(
    tier: UsageTier,
    pools: MessagePools,
    rng: Optional[random.Random] = None,
) -> str:
    """Pick a message uniformly at random from the tier's pool."""
    pool: Sequence[str] = [m for m in pools.for_tier(tier) if m]
    if not pool:
        return PLACEHOLDER_MESSAGE
    chooser = rng or random
    return chooser.choice(pool)
