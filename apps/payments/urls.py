from django.urls import path
from .views import (
    PaymentSummaryView, PaymentInitializeView, PaymentCallbackView,
    PaystackWebhookView, PaymentHistoryView
)

urlpatterns = [
    path('jobs/<int:job_id>/summary/', PaymentSummaryView.as_view(), name='payment_summary'),
    path('jobs/<int:job_id>/initialize/', PaymentInitializeView.as_view(), name='payment_initialize'),
    path('callback/', PaymentCallbackView.as_view(), name='payment_callback'),
    path('webhook/', PaystackWebhookView.as_view(), name='paystack_webhook'),
    path('history/', PaymentHistoryView.as_view(), name='payment_history'),
]
