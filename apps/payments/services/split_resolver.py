"""
Split Resolver
==============

Divides an order's gross revenue between the platform, the hotel
(intermediary) and the vendor according to the shop's split policy.

Policies:
    2-way: items split by platform/vendor fee; hotel always 0.
    cog-based: vendor is paid cost of goods first, the remaining profit is
        split by platform/vendor fee; hotel always 0.
    3-way: vendor is paid cost of goods first, the remaining profit is split
        by platform/hotel/vendor fee. Requires a hotel id, otherwise the
        policy is applied as 2-way.

Delivery fee and tip are routed whole to one party or divided by a share
map. No rounding happens here; amounts keep full precision until the
settlement step.

Example::

    from apps.payments.services import resolve_split

    splits = resolve_split(order, config)
    print(splits.platform, splits.hotel, splits.vendor, splits.model)
"""

import logging
from typing import Dict, Tuple

from ..models import Destination, Party, SplitModel
from .exceptions import ConfigurationError
from .types import MerchantPaymentConfig, OrderSummary, SplitResult

logger = logging.getLogger(__name__)

FEE_SUM_TOLERANCE = 0.001


def _adds_up(total: float) -> bool:
    # NaN compares False, so it never adds up.
    return abs(total - 1.0) <= FEE_SUM_TOLERANCE


def _parties(model: SplitModel) -> Tuple[str, ...]:
    """Parties a policy can pay."""
    if model == SplitModel.THREE_WAY:
        return (Party.PLATFORM.value, Party.HOTEL.value, Party.VENDOR.value)
    return (Party.PLATFORM.value, Party.VENDOR.value)


def validate_fee_fractions(config: MerchantPaymentConfig, model: SplitModel) -> None:
    """
    Check that the fee fractions of ``model`` add up to 100%.

    Raises:
        ConfigurationError: If the sum is off by more than 0.001 or is
            not a number.
    """
    fractions = config.fee_fractions(model)
    total = sum(fractions.values())
    if not _adds_up(total):
        if model == SplitModel.THREE_WAY:
            message = f"All fees must add up to 100% (got {total:g})"
        else:
            message = f"Platform and vendor fees must add up to 100% (got {total:g})"
        logger.warning("Rejected %s payment config: %s", model.value, message)
        raise ConfigurationError(message)


def _validate_destinations(config: MerchantPaymentConfig, model: SplitModel) -> None:
    """Every delivery/tip amount must land on a party the policy pays."""
    parties = _parties(model)
    for name in ('delivery', 'tip'):
        destination = getattr(config, f'{name}_destination')
        if destination not in Destination.values:
            raise ConfigurationError(f"Unknown {name}_destination '{destination}'")
        if destination == Destination.SPLIT:
            shares = config.split_map_for(getattr(config, f'{name}_split'), model)
            for party, share in shares.items():
                if party not in parties and share:
                    raise ConfigurationError(
                        f"{name}_split share for '{party}' cannot be paid "
                        f"under the {model.value} payment model"
                    )
        elif destination not in parties:
            raise ConfigurationError(
                f"{name}_destination '{destination}' is only valid for 3-way payment models"
            )


def _check_strict(order: OrderSummary, config: MerchantPaymentConfig, model: SplitModel) -> None:
    if model != SplitModel.TWO_WAY and order.cog > order.items_total:
        raise ConfigurationError(
            f"Cost of goods ({order.cog:g}) exceeds items total ({order.items_total:g})"
        )
    for name in ('delivery', 'tip'):
        if getattr(config, f'{name}_destination') != Destination.SPLIT:
            continue
        shares = config.split_map_for(getattr(config, f'{name}_split'), model)
        total = sum(shares.get(party, 0.0) for party in _parties(model))
        if not _adds_up(total):
            raise ConfigurationError(
                f"{name} split shares must add up to 100% (got {total:g})"
            )


def _route(amount: float, destination: str, split_map: Dict[str, float], amounts: Dict[str, float]) -> None:
    """Add ``amount`` to the party (or parties) named by ``destination``."""
    if destination == Destination.SPLIT:
        for party in amounts:
            amounts[party] += amount * split_map.get(party, 0.0)
    else:
        amounts[Party(destination).value] += amount


def _route_extras(order: OrderSummary, config: MerchantPaymentConfig, model: SplitModel, amounts: Dict[str, float]) -> None:
    _route(
        order.delivery_fee,
        config.delivery_destination,
        config.split_map_for(config.delivery_split, model),
        amounts,
    )
    _route(
        order.tip,
        config.tip_destination,
        config.split_map_for(config.tip_split, model),
        amounts,
    )


def _result(amounts: Dict[str, float], model: SplitModel) -> SplitResult:
    return SplitResult(
        platform=amounts[Party.PLATFORM.value],
        hotel=amounts.get(Party.HOTEL.value, 0.0),
        vendor=amounts[Party.VENDOR.value],
        model=model.value,
    )


def split_two_way(order: OrderSummary, config: MerchantPaymentConfig) -> SplitResult:
    """Platform + vendor split of items, delivery fee and tip."""
    model = SplitModel.TWO_WAY
    validate_fee_fractions(config, model)
    _validate_destinations(config, model)

    amounts = {
        Party.PLATFORM.value: order.items_total * config.platform_fee,
        Party.VENDOR.value: order.items_total * config.vendor_fee,
    }
    _route_extras(order, config, model, amounts)
    return _result(amounts, model)


def split_cog_based(order: OrderSummary, config: MerchantPaymentConfig) -> SplitResult:
    """Vendor takes cost of goods first, the profit is split platform + vendor."""
    model = SplitModel.COG_BASED
    validate_fee_fractions(config, model)
    _validate_destinations(config, model)

    profit = order.items_total - order.cog
    amounts = {
        Party.PLATFORM.value: profit * config.platform_fee,
        Party.VENDOR.value: order.cog + profit * config.vendor_fee,
    }
    _route_extras(order, config, model, amounts)
    return _result(amounts, model)


def split_three_way(order: OrderSummary, config: MerchantPaymentConfig) -> SplitResult:
    """Vendor takes cost of goods first, the profit is split three ways."""
    model = SplitModel.THREE_WAY
    validate_fee_fractions(config, model)
    _validate_destinations(config, model)

    profit = order.items_total - order.cog
    amounts = {
        Party.PLATFORM.value: profit * config.platform_fee,
        Party.HOTEL.value: profit * config.hotel_fee,
        Party.VENDOR.value: order.cog + profit * config.vendor_fee,
    }
    _route_extras(order, config, model, amounts)
    return _result(amounts, model)


_POLICIES = {
    SplitModel.TWO_WAY: split_two_way,
    SplitModel.COG_BASED: split_cog_based,
    SplitModel.THREE_WAY: split_three_way,
}


def resolve_split(order: OrderSummary, config: MerchantPaymentConfig, strict: bool = False) -> SplitResult:
    """
    Apply the shop's split policy to an order.

    Args:
        order: Monetary composition of the order.
        config: The shop's payment policy.
        strict: Also reject cost of goods above the items total and
            delivery/tip share maps that do not add up to 100%.

    Returns:
        SplitResult: Gross amount per party and the model applied.

    Raises:
        ConfigurationError: If the policy's fee fractions do not add up to
            100%, or a destination is not valid for the policy. Nothing is
            computed in that case.
    """
    if config is None:
        raise ConfigurationError('A payment configuration is required')

    model = config.effective_model
    if model != config.model:
        logger.info("Payment model %r applied as %s", config.model, model.value)
    if strict:
        _check_strict(order, config, model)
    elif model != SplitModel.TWO_WAY and order.cog > order.items_total:
        logger.warning(
            "Cost of goods %.2f exceeds items total %.2f",
            order.cog, order.items_total,
        )

    splits = _POLICIES[model](order, config)
    logger.debug(
        "Resolved %s split: platform=%.4f hotel=%.4f vendor=%.4f",
        splits.model, splits.platform, splits.hotel, splits.vendor,
    )
    return splits
