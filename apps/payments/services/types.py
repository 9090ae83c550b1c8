"""
Value types for the payment split engine.

All types are immutable and built fresh per checkout attempt. Amounts are
plain floats in the settlement currency's major unit (e.g. shekels, dollars);
conversion to minor units happens only at the HTTP boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from ..models import Destination, Party, SplitModel


# Share maps applied when a destination is "split" but no map was configured.
DEFAULT_TWO_PARTY_SPLIT = {Party.PLATFORM.value: 1.0, Party.VENDOR.value: 0.0}
DEFAULT_THREE_PARTY_SPLIT = {
    Party.PLATFORM.value: 1.0,
    Party.HOTEL.value: 0.0,
    Party.VENDOR.value: 0.0,
}


@dataclass(frozen=True)
class CartLineItem:
    """
    A single cart line.

    Attributes:
        price: Unit list price.
        quantity: Number of units.
        discounted_price: Unit price after a promotion, used instead of
            ``price`` when set.
        unit_cost: Vendor's cost of goods per unit (0 when not tracked).
    """

    price: float
    quantity: int = 1
    discounted_price: Optional[float] = None
    unit_cost: float = 0.0

    @property
    def effective_price(self) -> float:
        if self.discounted_price is not None:
            return self.discounted_price
        return self.price

    @property
    def line_total(self) -> float:
        return self.effective_price * self.quantity

    @property
    def line_cost(self) -> float:
        return self.unit_cost * self.quantity


@dataclass(frozen=True)
class OrderSummary:
    """
    Monetary composition of one order.

    Attributes:
        items_total: Sum of cart lines at their effective unit price.
        delivery_fee: Delivery fee, 0 when none applies.
        tip: Tip amount, 0 when none given.
        cog: Vendor's cost of goods for the items, 0 when not tracked.
    """

    items_total: float
    delivery_fee: float = 0.0
    tip: float = 0.0
    cog: float = 0.0

    @property
    def total(self) -> float:
        """Amount actually charged to the payer (cost of goods excluded)."""
        return self.items_total + self.delivery_fee + self.tip

    @property
    def profit(self) -> float:
        return self.items_total - self.cog

    @classmethod
    def from_cart_items(
        cls,
        items: Iterable[CartLineItem],
        delivery_fee: float = 0.0,
        tip: float = 0.0,
    ) -> "OrderSummary":
        items = list(items)
        return cls(
            items_total=sum(item.line_total for item in items),
            delivery_fee=delivery_fee,
            tip=tip,
            cog=sum(item.line_cost for item in items),
        )


@dataclass(frozen=True)
class MerchantPaymentConfig:
    """
    A shop's revenue-sharing policy.

    Fee fractions are shares in [0, 1]. ``vendor_id`` and ``hotel_id`` are
    opaque payout routing identifiers and never enter the arithmetic, except
    that a "3-way" policy without ``hotel_id`` is applied as "2-way".
    """

    model: str = SplitModel.TWO_WAY
    platform_fee: float = 0.0
    vendor_fee: float = 1.0
    hotel_fee: float = 0.0
    delivery_destination: str = Destination.PLATFORM
    tip_destination: str = Destination.PLATFORM
    delivery_split: Optional[Dict[str, float]] = field(default=None, hash=False)
    tip_split: Optional[Dict[str, float]] = field(default=None, hash=False)
    vendor_id: Optional[str] = None
    hotel_id: Optional[str] = None

    @property
    def effective_model(self) -> SplitModel:
        """The policy that will actually be applied."""
        if self.model == SplitModel.THREE_WAY:
            if self.hotel_id:
                return SplitModel.THREE_WAY
            return SplitModel.TWO_WAY
        if self.model == SplitModel.COG_BASED:
            return SplitModel.COG_BASED
        return SplitModel.TWO_WAY

    def fee_fractions(self, model: SplitModel) -> Dict[str, float]:
        """Fee fractions relevant to ``model``, keyed by party."""
        fractions = {
            Party.PLATFORM.value: self.platform_fee,
            Party.VENDOR.value: self.vendor_fee,
        }
        if model == SplitModel.THREE_WAY:
            fractions[Party.HOTEL.value] = self.hotel_fee
        return fractions

    def split_map_for(self, destination_split, model: SplitModel) -> Dict[str, float]:
        """Resolve a configured split map, falling back to all-platform."""
        if destination_split:
            return dict(destination_split)
        if model == SplitModel.THREE_WAY:
            return dict(DEFAULT_THREE_PARTY_SPLIT)
        return dict(DEFAULT_TWO_PARTY_SPLIT)


@dataclass(frozen=True)
class SplitResult:
    """Gross per-party amounts before processor fees."""

    platform: float
    hotel: float
    vendor: float
    model: str

    @property
    def gross_total(self) -> float:
        return self.platform + self.hotel + self.vendor

    def amount_for(self, party: str) -> float:
        return getattr(self, Party(party).value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'platform': self.platform,
            'hotel': self.hotel,
            'vendor': self.vendor,
            'model': str(self.model),
        }


@dataclass(frozen=True)
class FeeShares:
    """Processor fee allocated to each party, plus the whole fee."""

    platform: float
    hotel: float
    vendor: float
    total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'platform': self.platform,
            'hotel': self.hotel,
            'vendor': self.vendor,
            'total': self.total,
        }


@dataclass(frozen=True)
class FinalAmounts:
    """Payable amount per party after its fee share is deducted."""

    platform: float
    hotel: float
    vendor: float
    stripe_fee_total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'platform': self.platform,
            'hotel': self.hotel,
            'vendor': self.vendor,
            'stripeFeeTotal': self.stripe_fee_total,
        }


@dataclass(frozen=True)
class PaymentBreakdown:
    """Complete audit record of one split calculation."""

    splits: SplitResult
    stripe_fees: FeeShares
    final_amounts: FinalAmounts
    order: OrderSummary

    @property
    def breakdown(self) -> Dict[str, float]:
        return {
            'itemsTotal': self.order.items_total,
            'cog': self.order.cog,
            'profit': self.order.profit,
            'deliveryFee': self.order.delivery_fee,
            'tip': self.order.tip,
            'total': self.order.total,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'splits': self.splits.to_dict(),
            'stripeFees': self.stripe_fees.to_dict(),
            'finalAmounts': self.final_amounts.to_dict(),
            'breakdown': self.breakdown,
        }
