"""
Settlement and end-to-end breakdown tests.

Covers final amount flooring, the composed pipeline, the breakdown
wire shape, and concurrent use of the engine.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from apps.payments.models import Destination, SplitModel
from apps.payments.services import (
    CartLineItem,
    ConfigurationError,
    FeeShares,
    MerchantPaymentConfig,
    OrderSummary,
    SplitResult,
    calculate_payment_breakdown,
    finalize,
    to_minor_units,
)


# =============================================================================
# finalize Tests
# =============================================================================

class TestFinalize:
    """Tests for deducting fee shares from gross amounts."""

    def test_deducts_fee_share(self):
        splits = SplitResult(platform=30.0, hotel=0.0, vendor=85.0, model='2-way')
        fees = FeeShares(platform=1.0, hotel=0.0, vendor=2.5, total=3.5)

        final = finalize(splits, fees)

        assert final.platform == pytest.approx(29.0)
        assert final.hotel == 0
        assert final.vendor == pytest.approx(82.5)
        assert final.stripe_fee_total == pytest.approx(3.5)

    def test_floors_at_zero(self):
        splits = SplitResult(platform=0.1, hotel=0.0, vendor=10.0, model='2-way')
        fees = FeeShares(platform=0.5, hotel=0.2, vendor=1.0, total=1.7)

        final = finalize(splits, fees)

        assert final.platform == 0.0
        assert final.hotel == 0.0
        assert final.vendor == pytest.approx(9.0)


class TestToMinorUnits:
    """Tests for converting amounts to cents."""

    @pytest.mark.parametrize('amount,expected', [
        (115.0, 11500),
        (11.5, 1150),
        (0.1 + 0.2, 30),
        (0.0, 0),
        (19.99, 1999),
    ])
    def test_to_minor_units(self, amount, expected):
        assert to_minor_units(amount) == expected


# =============================================================================
# calculate_payment_breakdown Tests
# =============================================================================

class TestCalculatePaymentBreakdown:
    """Tests for the composed split, fee and settlement pipeline."""

    def test_two_way_usd(self, two_way_config, sample_order, usd_schedule):
        result = calculate_payment_breakdown(
            sample_order, two_way_config, currency='usd', schedule=usd_schedule
        )

        assert result.splits.platform == pytest.approx(30.0)
        assert result.splits.vendor == pytest.approx(85.0)
        assert result.stripe_fees.total == pytest.approx(3.635)
        assert result.final_amounts.platform == pytest.approx(30.0 - 3.635 * 30 / 115)
        assert result.final_amounts.vendor == pytest.approx(85.0 - 3.635 * 85 / 115)
        assert result.final_amounts.stripe_fee_total == pytest.approx(3.635)

    def test_defaults_to_ils_pricing(self, two_way_config, sample_order, usd_schedule):
        result = calculate_payment_breakdown(sample_order, two_way_config, schedule=usd_schedule)
        assert result.stripe_fees.total == pytest.approx(115 * 0.029 + 1.20)

    def test_final_amounts_plus_fee_equal_order_total(self, three_way_config, usd_schedule):
        order = OrderSummary(items_total=100.0, delivery_fee=10.0, tip=5.0, cog=20.0)

        result = calculate_payment_breakdown(order, three_way_config, 'usd', schedule=usd_schedule)

        final = result.final_amounts
        assert final.platform + final.hotel + final.vendor + final.stripe_fee_total == pytest.approx(order.total)

    def test_breakdown_echoes_order(self, cog_config, usd_schedule):
        order = OrderSummary(items_total=100.0, delivery_fee=6.0, tip=4.0, cog=40.0)

        result = calculate_payment_breakdown(order, cog_config, 'usd', schedule=usd_schedule)

        assert result.breakdown == {
            'itemsTotal': 100.0,
            'cog': 40.0,
            'profit': 60.0,
            'deliveryFee': 6.0,
            'tip': 4.0,
            'total': 110.0,
        }

    def test_to_dict_shape(self, three_way_config, usd_schedule):
        order = OrderSummary(items_total=100.0, cog=20.0)

        data = calculate_payment_breakdown(order, three_way_config, 'usd', schedule=usd_schedule).to_dict()

        assert set(data) == {'splits', 'stripeFees', 'finalAmounts', 'breakdown'}
        assert data['splits']['model'] == '3-way'
        assert data['splits']['hotel'] == pytest.approx(16.0)
        assert set(data['stripeFees']) == {'platform', 'hotel', 'vendor', 'total'}
        assert set(data['finalAmounts']) == {'platform', 'hotel', 'vendor', 'stripeFeeTotal'}

    def test_zero_order(self, two_way_config, usd_schedule):
        result = calculate_payment_breakdown(
            OrderSummary(items_total=0.0), two_way_config, 'usd', schedule=usd_schedule
        )

        assert result.stripe_fees.total == 0
        assert result.final_amounts.platform == 0
        assert result.final_amounts.vendor == 0

    def test_misconfiguration_aborts(self, sample_order, usd_schedule):
        config = MerchantPaymentConfig(platform_fee=0.5, vendor_fee=0.6)
        with pytest.raises(ConfigurationError):
            calculate_payment_breakdown(sample_order, config, 'usd', schedule=usd_schedule)

    def test_from_cart_items(self, cog_config, usd_schedule):
        order = OrderSummary.from_cart_items(
            [
                CartLineItem(price=10.0, quantity=3, unit_cost=4.0),
                CartLineItem(price=20.0, quantity=2, discounted_price=15.0, unit_cost=5.0),
            ],
            delivery_fee=5.0,
        )

        result = calculate_payment_breakdown(order, cog_config, 'usd', schedule=usd_schedule)

        assert order.items_total == pytest.approx(60.0)
        assert order.cog == pytest.approx(22.0)
        assert result.splits.vendor == pytest.approx(22.0 + 38.0 * 0.7)
        assert result.splits.platform == pytest.approx(38.0 * 0.3 + 5.0)

    @pytest.mark.parametrize('config', [
        MerchantPaymentConfig(platform_fee=1.0, vendor_fee=0.0),
        MerchantPaymentConfig(
            platform_fee=0.0,
            vendor_fee=1.0,
            delivery_destination=Destination.VENDOR,
            tip_destination=Destination.VENDOR,
        ),
        MerchantPaymentConfig(model=SplitModel.COG_BASED, platform_fee=0.5, vendor_fee=0.5),
        MerchantPaymentConfig(
            model=SplitModel.THREE_WAY,
            platform_fee=0.0,
            hotel_fee=0.01,
            vendor_fee=0.99,
            hotel_id='acct_hotel_1',
        ),
    ])
    @pytest.mark.parametrize('order', [
        OrderSummary(items_total=0.5),
        OrderSummary(items_total=3.0, tip=0.5, cog=1.0),
        OrderSummary(items_total=250.0, delivery_fee=15.0, tip=20.0, cog=100.0),
    ])
    def test_final_amounts_never_negative(self, config, order, usd_schedule):
        final = calculate_payment_breakdown(order, config, 'ils', schedule=usd_schedule).final_amounts

        assert final.platform >= 0
        assert final.hotel >= 0
        assert final.vendor >= 0


class TestConcurrentBreakdowns:
    """The engine holds no state between calls."""

    def test_parallel_calls_are_independent(self, two_way_config, three_way_config, usd_schedule):
        orders = [
            OrderSummary(items_total=float(n), delivery_fee=1.0, tip=0.5, cog=n / 4)
            for n in range(1, 41)
        ]

        def run(args):
            order, config = args
            return calculate_payment_breakdown(order, config, 'usd', schedule=usd_schedule)

        jobs = [(order, two_way_config if i % 2 else three_way_config) for i, order in enumerate(orders)]
        with ThreadPoolExecutor(max_workers=8) as executor:
            parallel = list(executor.map(run, jobs))

        sequential = [run(job) for job in jobs]
        assert parallel == sequential
