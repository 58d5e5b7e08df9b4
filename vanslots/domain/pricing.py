"""
Rental price calculation.

Extension fees are taken as given from the AvailabilityEngine; this module
never recomputes them.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from .models import PriceBreakdown, PricingTier

logger = logging.getLogger(__name__)

# Leftover minutes up to this many are not billed as an extra hour
GRACE_MINUTES = 15
# More extra hours than this are billed as a full day
EXTRA_HOURS_DAY_THRESHOLD = 6


def _money(amount: float) -> str:
    return f"£{amount:g}"


def _days(count: int) -> str:
    return f"{count} day{'s' if count > 1 else ''}"


class PriceCalculator:
    """
    Computes the total price of a rental from pricing tiers and fees.
    """

    def calculate(
        self,
        start: datetime,
        end: datetime,
        tiers: Sequence[PricingTier],
        extra_hours_rate: float = 0,
        pickup_extension_price: float = 0,
        return_extension_price: float = 0,
        gear_extra_cost_per_day: float = 0,
        add_ons_price: float = 0,
        sell_offer_percent: float = 0,
    ) -> Optional[PriceBreakdown]:
        """
        Price a rental from ``start`` (pickup) to ``end`` (return).

        Returns None if there are no tiers or the duration is not positive.
        """
        if not tiers:
            return None

        total_minutes = int((end - start).total_seconds() // 60)
        whole_hours, remaining_minutes = divmod(total_minutes, 60)
        billable_hours = whole_hours + 1 if remaining_minutes > GRACE_MINUTES else whole_hours

        if billable_hours <= 0:
            return None

        total_days, extra_hours = divmod(billable_hours, 24)
        if extra_hours > EXTRA_HOURS_DAY_THRESHOLD:
            total_days += 1
            extra_hours = 0

        tier = self._find_tier(tiers, total_days)
        price_per_day = tier.price_per_day
        if sell_offer_percent > 0:
            price_per_day = price_per_day * (1 - sell_offer_percent / 100)

        days_price = total_days * price_per_day
        gear_price = total_days * gear_extra_cost_per_day
        extra_hours_price = extra_hours * extra_hours_rate
        total_price = (
            days_price
            + gear_price
            + extra_hours_price
            + pickup_extension_price
            + return_extension_price
            + add_ons_price
        )

        if total_days > 0 and extra_hours > 0:
            breakdown = (
                f"({_days(total_days)} × {_money(price_per_day)}) + "
                f"({extra_hours}h × {_money(extra_hours_rate)})"
            )
        elif total_days > 0:
            breakdown = f"({_days(total_days)} × {_money(price_per_day)})"
        else:
            breakdown = f"({extra_hours}h × {_money(extra_hours_rate)})"

        if pickup_extension_price > 0:
            breakdown += f" + (Pickup Extension {_money(pickup_extension_price)})"
        if return_extension_price > 0:
            breakdown += f" + (Return Extension {_money(return_extension_price)})"
        if gear_extra_cost_per_day > 0:
            breakdown += f" + ({_days(total_days)} × {_money(gear_extra_cost_per_day)} Gear)"
        if add_ons_price > 0:
            breakdown += f" + (Add-ons {_money(add_ons_price)})"

        logger.debug("Priced %s -> %s: %s = %s", start, end, breakdown, total_price)

        return PriceBreakdown(
            total_hours=billable_hours,
            total_days=total_days,
            extra_hours=extra_hours,
            price_per_day=price_per_day,
            extra_hours_rate=extra_hours_rate,
            total_price=total_price,
            breakdown=breakdown,
            pickup_extension_price=pickup_extension_price,
            return_extension_price=return_extension_price,
            add_ons_price=add_ons_price,
        )

    @staticmethod
    def _find_tier(tiers: Sequence[PricingTier], days: int) -> PricingTier:
        """First tier covering ``days``; the last tier when none does."""
        for tier in tiers:
            if tier.min_days <= days <= tier.max_days:
                return tier
        return tiers[-1]

    @staticmethod
    def apply_discount(total_price: float, percentage: float) -> float:
        """Total after a percentage discount code."""
        if not 0 <= percentage <= 100:
            raise ValueError(f"Discount percentage must be between 0 and 100, got {percentage}")
        return total_price - total_price * percentage / 100
