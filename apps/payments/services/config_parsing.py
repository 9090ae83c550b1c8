"""Build a MerchantPaymentConfig from a stored shop document."""

import logging
from typing import Any, Dict, Mapping, Optional

from ..models import Destination, SplitModel
from .exceptions import ConfigurationError, MissingPaymentConfigError
from .types import MerchantPaymentConfig

logger = logging.getLogger(__name__)

# Shop documents were written with dashed keys first and camelCase later;
# both spellings are still in circulation.
FIELD_ALIASES = {
    'model': ('model',),
    'platform_fee': ('platform-fee', 'platformFee'),
    'vendor_fee': ('vendor-fee', 'vendorFee'),
    'hotel_fee': ('hotel-fee', 'hotelFee'),
    'delivery_destination': ('delivery-destination', 'deliveryDestination'),
    'tip_destination': ('tip-destination', 'tipDestination'),
    'delivery_split': ('delivery-split', 'deliverySplit'),
    'tip_split': ('tip-split', 'tipSplit'),
    'vendor_id': ('vendor-id', 'vendorId'),
    'hotel_id': ('hotel-id', 'hotelId'),
}

OPTIONS_KEYS = ('payment-options', 'paymentOptions')


def _lookup(options: Mapping[str, Any], name: str) -> Any:
    for key in FIELD_ALIASES[name]:
        value = options.get(key)
        if value is not None:
            return value
    return None


def _fraction(options: Mapping[str, Any], name: str, default: float) -> float:
    raw = _lookup(options, name)
    if raw is None or raw == '':
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be a number, got {raw!r}")
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"'{name}' must be between 0 and 1, got {value}")
    return value


def _destination(options: Mapping[str, Any], name: str) -> Destination:
    raw = _lookup(options, name) or Destination.PLATFORM
    try:
        return Destination(raw)
    except ValueError:
        raise ConfigurationError(
            f"Invalid {name}: {raw!r}. Valid options: "
            f"{', '.join(Destination.values)}"
        )


def _split_map(options: Mapping[str, Any], name: str) -> Optional[Dict[str, float]]:
    raw = _lookup(options, name)
    if not raw:
        return None
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"'{name}' must be a mapping of party to share")
    shares = {}
    for party, share in raw.items():
        try:
            shares[str(party)] = float(share or 0)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"'{name}' share for {party!r} must be a number, got {share!r}"
            )
    return shares


def extract_payment_options(shop: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    """
    Return the payment options mapping of a shop document.

    Accepts either a full shop document (options nested under
    ``payment-options`` or ``paymentOptions``) or the bare options mapping.
    """
    if not shop:
        return None
    for key in OPTIONS_KEYS:
        if key in shop:
            return shop[key] or None
    if any(alias in shop for aliases in FIELD_ALIASES.values() for alias in aliases):
        return shop
    return None


def parse_payment_options(shop: Optional[Mapping[str, Any]]) -> MerchantPaymentConfig:
    """
    Parse a shop's payment options into a MerchantPaymentConfig.

    Absent fields take the stored-document defaults (2-way, platform fee 0,
    vendor fee 1.0, everything routed to the platform). An explicit 0 is kept.

    Args:
        shop: Shop document or bare payment options mapping.

    Returns:
        MerchantPaymentConfig: Immutable policy for one calculation.

    Raises:
        MissingPaymentConfigError: If the shop carries no payment options.
        ConfigurationError: If a tag or fee value is malformed.
    """
    options = extract_payment_options(shop)
    if options is None:
        raise MissingPaymentConfigError('Shop payment-options configuration is missing')

    raw_model = _lookup(options, 'model') or SplitModel.TWO_WAY
    try:
        model = SplitModel(raw_model)
    except ValueError:
        raise ConfigurationError(
            f"Invalid payment model: {raw_model!r}. Valid options: "
            f"{', '.join(SplitModel.values)}"
        )

    vendor_id = _lookup(options, 'vendor_id')
    hotel_id = _lookup(options, 'hotel_id')

    config = MerchantPaymentConfig(
        model=model,
        platform_fee=_fraction(options, 'platform_fee', 0.0),
        vendor_fee=_fraction(options, 'vendor_fee', 1.0),
        hotel_fee=_fraction(options, 'hotel_fee', 0.0),
        delivery_destination=_destination(options, 'delivery_destination'),
        tip_destination=_destination(options, 'tip_destination'),
        delivery_split=_split_map(options, 'delivery_split'),
        tip_split=_split_map(options, 'tip_split'),
        vendor_id=str(vendor_id) if vendor_id else None,
        hotel_id=str(hotel_id) if hotel_id else None,
    )
    logger.debug(
        "Parsed payment options: model=%s effective=%s",
        config.model, config.effective_model,
    )
    return config
