"""
Settlement Finalizer
====================

Deducts each party's processor fee share from its gross amount and
assembles the complete payment breakdown for a checkout.

Example:
    Computing a checkout breakdown::

        from apps.payments.services import (
            OrderSummary,
            calculate_payment_breakdown,
            parse_payment_options,
        )

        config = parse_payment_options(shop)
        order = OrderSummary(items_total=100, delivery_fee=10, tip=5)
        result = calculate_payment_breakdown(order, config, currency='usd')
        print(result.final_amounts.vendor)

Note:
    The pipeline is pure and synchronous. It can be called concurrently
    from many requests; a call either returns or raises ConfigurationError.
"""

import logging
from typing import Optional

from .fee_allocator import FeeSchedule, allocate_fees
from .split_resolver import resolve_split
from .types import (
    FeeShares,
    FinalAmounts,
    MerchantPaymentConfig,
    OrderSummary,
    PaymentBreakdown,
    SplitResult,
)

logger = logging.getLogger(__name__)


def finalize(splits: SplitResult, fees: FeeShares) -> FinalAmounts:
    """Payable amount per party, floored at zero."""
    return FinalAmounts(
        platform=max(0.0, splits.platform - fees.platform),
        hotel=max(0.0, splits.hotel - fees.hotel),
        vendor=max(0.0, splits.vendor - fees.vendor),
        stripe_fee_total=fees.total,
    )


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount (e.g. 12.34) to integer cents (1234)."""
    return int(round(amount * 100))


def calculate_payment_breakdown(
    order: OrderSummary,
    config: MerchantPaymentConfig,
    currency: str = 'ils',
    schedule: Optional[FeeSchedule] = None,
    strict: bool = False,
) -> PaymentBreakdown:
    """
    Run the split, fee and settlement stages for one checkout.

    Args:
        order: Monetary composition of the order.
        config: The shop's payment policy.
        currency: Settlement currency, selects the processor fixed fee.
        schedule: Processor pricing; defaults to the configured schedule.
        strict: Passed to resolve_split.

    Returns:
        PaymentBreakdown: Gross splits, fee shares, final amounts and the
        order composition.

    Raises:
        ConfigurationError: If the payment policy cannot be applied.
    """
    splits = resolve_split(order, config, strict=strict)
    fees = allocate_fees(splits, order.total, currency, schedule=schedule)
    final_amounts = finalize(splits, fees)

    logger.info(
        "Payment breakdown (%s, %s): total=%.2f fee=%.4f "
        "platform=%.2f hotel=%.2f vendor=%.2f",
        splits.model, currency, order.total, fees.total,
        final_amounts.platform, final_amounts.hotel, final_amounts.vendor,
    )
    return PaymentBreakdown(
        splits=splits,
        stripe_fees=fees,
        final_amounts=final_amounts,
        order=order,
    )
