"""
Domain: Sale channels and their commission / ad-spend rules.

A channel (sale type) is the acquisition source of a sale. Each channel has
exactly one rule record:

- REFERRAL:     commission is a flat currency amount; no ad spend.
- INSTAGRAM:    no commission; no ad spend.
- PERSONAL:     no commission; no ad spend.
- PAID_TRAFFIC: no commission; ad spend is attributed to the sale.

A sale with no channel resolves to the percentage rule
(amount * commission_rate / 100). New channels are added as a new enum member
plus an entry in CHANNEL_RULES.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


class SaleChannel(str, Enum):
    PAID_TRAFFIC = "Paid-Traffic"
    REFERRAL = "Referral"
    INSTAGRAM = "Instagram"
    PERSONAL = "Personal"


class CommissionMode(str, Enum):
    FIXED = "fixed"
    NONE = "none"
    RATE = "rate"


@dataclass(frozen=True, slots=True)
class ChannelRule:
    commission_mode: CommissionMode
    allows_ad_cost: bool = False


CHANNEL_RULES: Mapping[SaleChannel, ChannelRule] = {
    SaleChannel.PAID_TRAFFIC: ChannelRule(CommissionMode.NONE, allows_ad_cost=True),
    SaleChannel.REFERRAL: ChannelRule(CommissionMode.FIXED),
    SaleChannel.INSTAGRAM: ChannelRule(CommissionMode.NONE),
    SaleChannel.PERSONAL: ChannelRule(CommissionMode.NONE),
}

RATE_RULE = ChannelRule(CommissionMode.RATE)

# KPI grouping label for sales recorded without a channel.
DEFAULT_KPI_CHANNEL = SaleChannel.INSTAGRAM


def rule_for(channel: Optional[SaleChannel]) -> ChannelRule:
    """Resolve the commission/ad-cost rule for a channel (None -> percentage rule)."""

    if channel is None:
        return RATE_RULE
    return CHANNEL_RULES[channel]


def parse_channel(value: Optional[str]) -> Optional[SaleChannel]:
    """
    Parse a stored channel value.

    Empty values map to None. Unknown values raise ValueError.
    """

    if value is None or value == "":
        return None
    return SaleChannel(value)
