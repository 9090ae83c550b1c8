"""
Domain exceptions for payments services.

These exceptions are raised by the split engine and represent merchant
setup defects, not transient failures. Views translate them into a
client-facing 400 response; the checkout must not be attempted.

Exception Hierarchy:
    PaymentsServiceError (base)
    └── ConfigurationError
        └── MissingPaymentConfigError
"""


class PaymentsServiceError(Exception):
    """Base exception for payments service errors."""
    pass


class ConfigurationError(PaymentsServiceError):
    """
    Raised when a merchant payment configuration cannot be applied.

    Typically the fee fractions of the selected policy do not add up to
    100%, or a destination/model tag is not valid for the policy.

    Example:
        raise ConfigurationError(
            "Platform and vendor fees must add up to 100% (got 1.1)"
        )
    """
    pass


class MissingPaymentConfigError(ConfigurationError):
    """Raised when a shop has no payment-options configuration at all."""
    pass
