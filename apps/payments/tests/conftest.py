import pytest
from rest_framework.test import APIClient

from apps.payments.models import Destination, SplitModel
from apps.payments.services import FeeSchedule, MerchantPaymentConfig, OrderSummary


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def usd_schedule():
    """Standard processor pricing (2.9% + fixed fee)."""
    return FeeSchedule(percentage=0.029, fixed_fees={'usd': 0.30, 'ils': 1.20}, default_fixed_fee=1.20)


@pytest.fixture
def two_way_config():
    """20% platform commission, delivery to platform, tip to vendor."""
    return MerchantPaymentConfig(
        model=SplitModel.TWO_WAY,
        platform_fee=0.2,
        vendor_fee=0.8,
        delivery_destination=Destination.PLATFORM,
        tip_destination=Destination.VENDOR,
        vendor_id='acct_vendor_1',
    )


@pytest.fixture
def cog_config():
    """30% of profit to platform after the vendor recovers cost of goods."""
    return MerchantPaymentConfig(
        model=SplitModel.COG_BASED,
        platform_fee=0.3,
        vendor_fee=0.7,
        vendor_id='acct_vendor_1',
    )


@pytest.fixture
def three_way_config():
    """Platform 10%, hotel 20%, vendor 70% of profit."""
    return MerchantPaymentConfig(
        model=SplitModel.THREE_WAY,
        platform_fee=0.1,
        hotel_fee=0.2,
        vendor_fee=0.7,
        vendor_id='acct_vendor_1',
        hotel_id='acct_hotel_1',
    )


@pytest.fixture
def sample_order():
    """Order with delivery fee and tip, no cost of goods."""
    return OrderSummary(items_total=100.0, delivery_fee=10.0, tip=5.0)


@pytest.fixture
def shop_document():
    """Shop document as stored, with dashed payment-options keys."""
    return {
        'name': 'Gate 4 Grill',
        'stadiumId': 'stadium-1',
        'payment-options': {
            'model': '2-way',
            'platform-fee': 0.2,
            'vendor-fee': 0.8,
            'delivery-destination': 'platform',
            'tip-destination': 'vendor',
            'vendor-id': 'acct_vendor_1',
        },
    }
