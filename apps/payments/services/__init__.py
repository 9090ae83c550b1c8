"""
Payments services - Business logic layer.

This package contains the payment split engine used at checkout:
- Merchant payment-options parsing
- Split resolution (2-way, cog-based, 3-way)
- Processor fee allocation
- Settlement of final payable amounts
"""

from .config_parsing import (
    extract_payment_options,
    parse_payment_options,
)

from .split_resolver import (
    resolve_split,
    split_two_way,
    split_cog_based,
    split_three_way,
    validate_fee_fractions,
)

from .fee_allocator import (
    FeeSchedule,
    allocate_fees,
    get_default_fee_schedule,
)

from .settlement import (
    finalize,
    calculate_payment_breakdown,
    to_minor_units,
)

from .types import (
    CartLineItem,
    OrderSummary,
    MerchantPaymentConfig,
    SplitResult,
    FeeShares,
    FinalAmounts,
    PaymentBreakdown,
)

# Domain Exceptions
from .exceptions import (
    PaymentsServiceError,
    ConfigurationError,
    MissingPaymentConfigError,
)

__all__ = [
    # Config parsing
    'extract_payment_options',
    'parse_payment_options',
    # Split resolution
    'resolve_split',
    'split_two_way',
    'split_cog_based',
    'split_three_way',
    'validate_fee_fractions',
    # Fee allocation
    'FeeSchedule',
    'allocate_fees',
    'get_default_fee_schedule',
    # Settlement
    'finalize',
    'calculate_payment_breakdown',
    'to_minor_units',
    # Types
    'CartLineItem',
    'OrderSummary',
    'MerchantPaymentConfig',
    'SplitResult',
    'FeeShares',
    'FinalAmounts',
    'PaymentBreakdown',
    # Exceptions
    'PaymentsServiceError',
    'ConfigurationError',
    'MissingPaymentConfigError',
]
