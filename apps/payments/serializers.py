"""
Serializers for payments app.

This module contains:
1. Input serializers - Checkout request validation
2. Response serializers - API documentation and output formatting

Input Serializers:
    CartItemSerializer - A single cart line item
    PaymentBreakdownInputSerializer - Checkout breakdown request body

Response Serializers:
    PaymentBreakdownResponseSerializer - Breakdown of a checkout
    PaymentErrorSerializer - Rejected checkout
"""

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .services import CartLineItem, OrderSummary

# Tolerance between a client-declared amount and the computed total.
AMOUNT_TOLERANCE = Decimal('0.01')


# =============================================================================
# Input Serializers
# =============================================================================

class CartItemSerializer(serializers.Serializer):
    """
    Validate a cart line item.

    Fields:
        price (decimal): Unit list price
        quantity (int): Number of units
        discounted_price (decimal): Unit price after promotion, optional
        unit_cost (decimal): Cost of goods per unit, optional
    """

    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    quantity = serializers.IntegerField(min_value=1, default=1)
    discounted_price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False,
        allow_null=True,
    )
    unit_cost = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0'),
        default=Decimal('0'),
    )

    def to_line_item(self, attrs):
        discounted = attrs.get('discounted_price')
        return CartLineItem(
            price=float(attrs['price']),
            quantity=attrs.get('quantity', 1),
            discounted_price=float(discounted) if discounted is not None else None,
            unit_cost=float(attrs.get('unit_cost') or 0),
        )


class PaymentBreakdownInputSerializer(serializers.Serializer):
    """
    Validate a checkout breakdown request.

    Fields:
        currency (str): Settlement currency code
        amount (decimal): Total the client expects to be charged, optional
        items (list): Cart line items
        items_total (decimal): Items total, when no line items are sent
        cog (decimal): Cost of goods, when no line items are sent
        delivery_fee (decimal): Delivery fee
        tip (decimal): Tip
        shop (object): Shop document or its payment options

    Note:
        Exactly one of ``items`` or ``items_total`` must be given. The shop
        configuration is validated by the split engine, not here.
    """

    currency = serializers.CharField(max_length=3, required=False)
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False
    )
    items = CartItemSerializer(many=True, required=False)
    items_total = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False
    )
    cog = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), default=Decimal('0')
    )
    delivery_fee = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), default=Decimal('0')
    )
    tip = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), default=Decimal('0')
    )
    shop = serializers.JSONField(required=False, allow_null=True)

    def validate_currency(self, value):
        return value.strip().upper()

    def validate(self, attrs):
        """Require one item source and build the order summary."""
        has_items = 'items' in attrs
        has_total = 'items_total' in attrs

        if has_items == has_total:
            raise serializers.ValidationError(
                'Provide either items or items_total, not both'
            )

        attrs.setdefault('currency', settings.PAYMENT_DEFAULT_CURRENCY.upper())

        delivery_fee = float(attrs['delivery_fee'])
        tip = float(attrs['tip'])
        if has_items:
            line_items = [
                CartItemSerializer().to_line_item(item) for item in attrs['items']
            ]
            order = OrderSummary.from_cart_items(line_items, delivery_fee=delivery_fee, tip=tip)
        else:
            order = OrderSummary(
                items_total=float(attrs['items_total']),
                delivery_fee=delivery_fee,
                tip=tip,
                cog=float(attrs['cog']),
            )

        amount = attrs.get('amount')
        if amount is not None:
            computed = Decimal(str(round(order.total, 2)))
            if abs(amount - computed) > AMOUNT_TOLERANCE:
                raise serializers.ValidationError({
                    'amount': f'Amount {amount} does not match order total {computed}'
                })

        attrs['order'] = order
        return attrs


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class SplitsSerializer(serializers.Serializer):
    """Gross amount per party."""
    platform = serializers.FloatField()
    hotel = serializers.FloatField()
    vendor = serializers.FloatField()
    model = serializers.CharField()


class StripeFeesSerializer(serializers.Serializer):
    """Processor fee share per party."""
    platform = serializers.FloatField()
    hotel = serializers.FloatField()
    vendor = serializers.FloatField()
    total = serializers.FloatField()


class FinalAmountsSerializer(serializers.Serializer):
    """Payable amount per party after fees."""
    platform = serializers.FloatField()
    hotel = serializers.FloatField()
    vendor = serializers.FloatField()
    stripeFeeTotal = serializers.FloatField()


class OrderCompositionSerializer(serializers.Serializer):
    """Echo of the order composition."""
    itemsTotal = serializers.FloatField()
    cog = serializers.FloatField()
    profit = serializers.FloatField()
    deliveryFee = serializers.FloatField()
    tip = serializers.FloatField()
    total = serializers.FloatField()


class BreakdownSerializer(serializers.Serializer):
    splits = SplitsSerializer()
    stripeFees = StripeFeesSerializer()
    finalAmounts = FinalAmountsSerializer()
    breakdown = OrderCompositionSerializer()


class PaymentBreakdownResponseSerializer(serializers.Serializer):
    """Response serializer for a checkout breakdown."""
    currency = serializers.CharField()
    amount = serializers.FloatField()
    amount_minor = serializers.IntegerField()
    breakdown = BreakdownSerializer()


class PaymentErrorSerializer(serializers.Serializer):
    """Rejected checkout."""
    error = serializers.CharField()
    code = serializers.CharField()
