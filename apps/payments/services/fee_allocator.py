"""
Fee Allocator
=============

Computes the payment processor's fee for a transaction and charges it to
each party in proportion to that party's share of the gross amount.

The processor charges ``total * percentage + fixed_fee`` where the fixed
part depends on the settlement currency. The schedule is a value object so
new currencies can be added through settings without code changes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from django.conf import settings

from .types import FeeShares, SplitResult

logger = logging.getLogger(__name__)

DEFAULT_PERCENTAGE_FEE = 0.029
DEFAULT_FIXED_FEES = {'usd': 0.30, 'ils': 1.20}
DEFAULT_FALLBACK_FIXED_FEE = 1.20


@dataclass(frozen=True)
class FeeSchedule:
    """
    Processor pricing.

    Attributes:
        percentage: Fraction of the charged total (0.029 = 2.9%).
        fixed_fees: Per-transaction fixed fee keyed by lower-case currency
            code, in major units of that currency.
        default_fixed_fee: Fixed fee for currencies missing from the table.
    """

    percentage: float = DEFAULT_PERCENTAGE_FEE
    fixed_fees: Mapping[str, float] = field(
        default_factory=lambda: dict(DEFAULT_FIXED_FEES), hash=False
    )
    default_fixed_fee: float = DEFAULT_FALLBACK_FIXED_FEE

    def fixed_fee_for(self, currency: Optional[str]) -> float:
        code = (currency or '').strip().lower()
        return self.fixed_fees.get(code, self.default_fixed_fee)

    def total_fee(self, total_amount: float, currency: Optional[str]) -> float:
        return total_amount * self.percentage + self.fixed_fee_for(currency)

    @classmethod
    def from_dict(cls, data: Mapping) -> "FeeSchedule":
        fixed_fees = {
            str(code).lower(): float(fee)
            for code, fee in (data.get('FIXED_FEES') or DEFAULT_FIXED_FEES).items()
        }
        return cls(
            percentage=float(data.get('PERCENTAGE', DEFAULT_PERCENTAGE_FEE)),
            fixed_fees=fixed_fees,
            default_fixed_fee=float(
                data.get('DEFAULT_FIXED_FEE', DEFAULT_FALLBACK_FIXED_FEE)
            ),
        )


def get_default_fee_schedule() -> FeeSchedule:
    """Fee schedule configured in ``settings.PAYMENT_PROCESSOR_FEES``."""
    return FeeSchedule.from_dict(getattr(settings, 'PAYMENT_PROCESSOR_FEES', {}))


def allocate_fees(
    splits: SplitResult,
    total_amount: float,
    currency: str = 'ils',
    schedule: Optional[FeeSchedule] = None,
) -> FeeShares:
    """
    Allocate the processor fee proportionally to gross shares.

    Args:
        splits: Gross amount per party.
        total_amount: Amount charged to the payer
            (items total + delivery fee + tip).
        currency: Settlement currency code, case-insensitive.
        schedule: Processor pricing; defaults to the configured schedule.

    Returns:
        FeeShares: Fee share per party and the whole fee. All zero when
        ``total_amount`` is zero, ``total`` included: an empty transaction
        is never sent to the processor, so its fixed fee is not charged.
    """
    if not total_amount:
        return FeeShares(platform=0.0, hotel=0.0, vendor=0.0, total=0.0)

    schedule = schedule or get_default_fee_schedule()
    total_fee = schedule.total_fee(total_amount, currency)

    shares: Dict[str, float] = {
        party: total_fee * (splits.amount_for(party) / total_amount)
        for party in ('platform', 'hotel', 'vendor')
    }
    logger.debug(
        "Processor fee %.4f %s on %.2f allocated: %s",
        total_fee, currency, total_amount, shares,
    )
    return FeeShares(total=total_fee, **shares)
