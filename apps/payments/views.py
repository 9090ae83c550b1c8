import logging

from django.conf import settings
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .serializers import (
    PaymentBreakdownInputSerializer,
    PaymentBreakdownResponseSerializer,
    PaymentErrorSerializer,
)
from .services import (
    ConfigurationError,
    calculate_payment_breakdown,
    parse_payment_options,
    to_minor_units,
)

logger = logging.getLogger(__name__)

CONFIGURATION_ERROR_CODE = 'payment_configuration_error'


@extend_schema(
    request=PaymentBreakdownInputSerializer,
    responses={
        200: PaymentBreakdownResponseSerializer,
        400: PaymentErrorSerializer,
    },
    description=(
        "Compute how a checkout is divided between platform, hotel and "
        "vendor, net of payment processor fees."
    ),
    tags=['payments'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def payment_breakdown(request):
    """Compute the payment split for a checkout - thin HTTP handler."""
    input_serializer = PaymentBreakdownInputSerializer(data=request.data)
    input_serializer.is_valid(raise_exception=True)
    params = input_serializer.validated_data

    order = params['order']
    currency = params['currency']

    try:
        config = parse_payment_options(params.get('shop'))
        result = calculate_payment_breakdown(
            order,
            config,
            currency=currency.lower(),
            strict=settings.PAYMENT_STRICT_VALIDATION,
        )
    except ConfigurationError as e:
        # Merchant setup defect: the payment must not be attempted.
        logger.warning("Checkout rejected: %s", e)
        return Response(
            {'error': str(e), 'code': CONFIGURATION_ERROR_CODE},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'currency': currency,
        'amount': order.total,
        'amount_minor': to_minor_units(order.total),
        'breakdown': result.to_dict(),
    })
