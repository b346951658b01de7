import hashlib
import hmac
import logging
import uuid
import requests
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from apps.jobs.utils import send_notification
from core.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)


def payment_breakdown(job):
    """Service amount agreed at hire, the platform fee on top, and what the customer is charged."""
    amount = job.total_price or Decimal('0.00')
    service_fee = job.commission_amount or Decimal('0.00')
    return {
        'amount': amount,
        'service_fee': service_fee,
        'total': amount + service_fee,
    }


def generate_reference(job, user):
    return f"wb-job-{job.id}-cust-{user.id}-{uuid.uuid4().hex[:10]}"


def _headers():
    return {
        'Authorization': f'Bearer {settings.PAYSTACK_SECRET_KEY.strip()}',
        'Content-Type': 'application/json'
    }


def initialize_payment(payment):
    """
    Start a Paystack hosted checkout for a pending payment.
    Returns the gateway's data block (authorization_url, access_code, reference).
    """
    job = payment.job
    payload = {
        'email': payment.customer.email,
        'amount': payment.amount_in_minor_units,
        'currency': payment.currency,
        'reference': payment.reference,
        'callback_url': f"{settings.APP_URL.rstrip('/')}/payments/callback?jobId={job.id}",
        'metadata': {
            'jobId': job.id,
            'customerId': payment.customer_id,
        },
    }
    try:
        logger.info(f"Sending Paystack initialize request for reference {payment.reference}")
        response = requests.post(
            f"{settings.PAYSTACK_BASE_URL}/transaction/initialize",
            json=payload,
            headers=_headers(),
            timeout=10
        )
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack request failed: {str(e)}")
        raise PaymentGatewayError("Could not reach the payment provider") from e
    except ValueError as e:
        logger.error(f"Paystack returned a non-JSON response: {str(e)}")
        raise PaymentGatewayError("Invalid response from the payment provider") from e

    if not response.ok or not data.get('status') or not data.get('data', {}).get('authorization_url'):
        logger.error(f"Paystack initialization failed: {data}")
        raise PaymentGatewayError(data.get('message') or 'Could not initialize payment', data)
    logger.info(f"Paystack initialized reference {payment.reference}")
    return data['data']


def verify_payment(reference):
    """
    Verify a Paystack transaction.
    Returns the transaction data block or raises PaymentGatewayError.
    """
    try:
        response = requests.get(
            f"{settings.PAYSTACK_BASE_URL}/transaction/verify/{reference}",
            headers=_headers(),
            timeout=10
        )
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack verification failed: {str(e)}")
        raise PaymentGatewayError("Could not reach the payment provider") from e
    except ValueError as e:
        logger.error(f"Paystack verification returned a non-JSON response: {str(e)}")
        raise PaymentGatewayError("Invalid response from the payment provider") from e

    if not response.ok or not data.get('status'):
        logger.error(f"Paystack verification rejected for {reference}: {data}")
        raise PaymentGatewayError(data.get('message') or 'Verification failed', data)
    return data.get('data') or {}


def is_valid_signature(raw_body, signature):
    if not signature:
        return False
    secret = settings.PAYSTACK_SECRET_KEY.strip().encode('utf-8')
    computed_signature = hmac.new(secret, raw_body, hashlib.sha512).hexdigest()
    return hmac.compare_digest(computed_signature, signature)


def settle_payment(payment, gateway_data):
    """
    Apply a verified Paystack transaction to the payment and its job.
    Returns True when the payment ends up paid. Already-paid payments are left untouched.
    """
    with transaction.atomic():
        payment = type(payment).objects.select_for_update().select_related('job').get(pk=payment.pk)
        if payment.status == 'paid':
            return True

        succeeded = (
            gateway_data.get('status') == 'success' and
            gateway_data.get('amount') == payment.amount_in_minor_units
        )
        if not succeeded:
            payment.mark_failed(gateway_data)
            logger.error(
                f"Payment {payment.reference} not settled: status={gateway_data.get('status')}, "
                f"amount={gateway_data.get('amount')}, expected={payment.amount_in_minor_units}"
            )
            return False

        payment.mark_paid(gateway_data)
        job = payment.job
        if job.escrow_status == 'unpaid':
            job.escrow_status = 'paid'
            job.save(update_fields=['escrow_status', 'updated_at'])
    logger.info(f"Payment {payment.reference} verified, job {job.id} escrow funded")

    # Notify customer
    customer = payment.customer
    email_subject = f"Payment Secured for Job: {job.title}"
    email_message = (
        f"Dear {customer.name},\n\n"
        f"Your payment of {payment.total_amount} {payment.currency} for '{job.title}' is held in escrow.\n"
        f"It is released to the worker when you confirm the job is complete.\n\n"
        f"Best regards,\nWorkBee Team"
    )
    sms_message = f"Payment of {payment.total_amount} {payment.currency} for '{job.title}' secured in escrow."
    send_notification(customer, email_subject, email_message, sms_message)

    # Notify worker
    worker = job.selected_worker
    if worker:
        email_subject = f"Payment Secured: {job.title}"
        email_message = (
            f"Dear {worker.name},\n\n"
            f"{customer.name} has paid for '{job.title}'. The payment is held in escrow.\n"
            f"Calling and location sharing are now available in your chat.\n\n"
            f"Best regards,\nWorkBee Team"
        )
        sms_message = f"Payment for '{job.title}' secured. You can start the job."
        send_notification(worker, email_subject, email_message, sms_message)
    return True
