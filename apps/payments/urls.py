from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    # POST /api/payments/breakdown/ - Split a checkout between parties
    path('breakdown/', views.payment_breakdown, name='breakdown'),
]
