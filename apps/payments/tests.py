import hashlib
import hmac
import json
from decimal import Decimal
from unittest.mock import patch, MagicMock

import requests
from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.jobs.models import Job
from apps.payments.models import Payment
from apps.payments.utils import is_valid_signature, payment_breakdown

User = get_user_model()

PASSWORD = "Str0ngPass!x"
SECRET = 'sk_test_secret'


def gateway_response(payload, ok=True):
    response = MagicMock()
    response.ok = ok
    response.json.return_value = payload
    return response


@override_settings(PAYSTACK_SECRET_KEY=SECRET, APP_URL='http://localhost:9002', PAYSTACK_CURRENCY='NGN')
class PaymentTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )
        self.job = Job.objects.create(customer=self.customer, title='Install fan', description='Ceiling fan')
        self.job.hire(self.worker, Decimal('1000.00'))

    def create_payment(self, reference='wb-ref-1'):
        return Payment.objects.create(
            job=self.job,
            customer=self.customer,
            amount=Decimal('1000.00'),
            service_fee=Decimal('50.00'),
            total_amount=Decimal('1050.00'),
            reference=reference,
        )


class PaymentSummaryTest(PaymentTestBase):
    def test_breakdown_adds_service_fee(self):
        breakdown = payment_breakdown(self.job)

        self.assertEqual(breakdown['amount'], Decimal('1000.00'))
        self.assertEqual(breakdown['service_fee'], Decimal('50.00'))
        self.assertEqual(breakdown['total'], Decimal('1050.00'))

    def test_summary_endpoint(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(f'/payments/jobs/{self.job.id}/summary/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['amount'], '1000.00')
        self.assertEqual(response.data['service_fee'], '50.00')
        self.assertEqual(response.data['total'], '1050.00')
        self.assertEqual(response.data['worker_name'], 'Work')

    def test_summary_for_someone_elses_job(self):
        other = User.objects.create_user(username='other', email='other@example.com', password=PASSWORD, name='Other')
        self.client.force_authenticate(user=other)

        response = self.client.get(f'/payments/jobs/{self.job.id}/summary/')

        self.assertEqual(response.status_code, 404)


class PaymentInitializeTest(PaymentTestBase):
    @patch('apps.payments.utils.requests.post')
    def test_initialize_creates_pending_payment(self, mock_post):
        mock_post.return_value = gateway_response({
            'status': True,
            'message': 'Authorization URL created',
            'data': {'authorization_url': 'https://checkout.paystack.com/abc', 'access_code': 'abc', 'reference': 'x'},
        })
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['authorization_url'], 'https://checkout.paystack.com/abc')
        payment = Payment.objects.get(reference=response.data['reference'])
        self.assertEqual(payment.status, 'pending')
        self.assertEqual(payment.total_amount, Decimal('1050.00'))

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://api.paystack.co/transaction/initialize')
        self.assertEqual(kwargs['headers']['Authorization'], f'Bearer {SECRET}')
        self.assertEqual(kwargs['json']['amount'], 105000)
        self.assertEqual(kwargs['json']['email'], 'cust@example.com')
        self.assertEqual(
            kwargs['json']['callback_url'],
            f'http://localhost:9002/payments/callback?jobId={self.job.id}'
        )
        self.assertEqual(kwargs['json']['metadata']['jobId'], self.job.id)

    @patch('apps.payments.utils.requests.post')
    def test_pending_checkout_is_reused(self, mock_post):
        mock_post.return_value = gateway_response({
            'status': True,
            'data': {'authorization_url': 'https://checkout.paystack.com/abc', 'access_code': 'abc'},
        })
        self.client.force_authenticate(user=self.customer)

        first = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')
        second = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 200)
        self.assertEqual(second.data['reference'], first.data['reference'])
        self.assertEqual(Payment.objects.filter(job=self.job).count(), 1)
        mock_post.assert_called_once()

    @patch('apps.payments.utils.requests.post')
    def test_gateway_rejection_returns_bad_gateway(self, mock_post):
        mock_post.return_value = gateway_response({'status': False, 'message': 'Invalid key'}, ok=False)
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data['error'], 'Invalid key')
        self.assertEqual(Payment.objects.get().status, 'failed')

    @patch('apps.payments.utils.requests.post')
    def test_network_error_returns_bad_gateway(self, mock_post):
        mock_post.side_effect = requests.exceptions.ConnectionError('down')
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')

        self.assertEqual(response.status_code, 502)

    @patch('apps.payments.utils.requests.post')
    def test_already_funded_job_cannot_be_paid_again(self, mock_post):
        self.job.escrow_status = 'paid'
        self.job.save()
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(f'/payments/jobs/{self.job.id}/initialize/')

        self.assertEqual(response.status_code, 400)
        mock_post.assert_not_called()


class PaymentCallbackTest(PaymentTestBase):
    def setUp(self):
        super().setUp()
        self.payment = self.create_payment()

    @patch('apps.payments.utils.requests.get')
    def test_successful_verification_funds_escrow(self, mock_get):
        mock_get.return_value = gateway_response({
            'status': True,
            'data': {'status': 'success', 'amount': 105000, 'reference': 'wb-ref-1'},
        })

        response = self.client.get('/payments/callback/', {'reference': 'wb-ref-1', 'jobId': self.job.id})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'paid')
        self.payment.refresh_from_db()
        self.job.refresh_from_db()
        self.assertIsNotNone(self.payment.paid_at)
        self.assertEqual(self.job.escrow_status, 'paid')
        self.assertEqual(
            sorted(message.to[0] for message in mail.outbox),
            ['cust@example.com', 'work@example.com']
        )
        self.assertEqual(mock_get.call_args[0][0], 'https://api.paystack.co/transaction/verify/wb-ref-1')

    @patch('apps.payments.utils.requests.get')
    def test_amount_mismatch_fails_payment(self, mock_get):
        mock_get.return_value = gateway_response({
            'status': True,
            'data': {'status': 'success', 'amount': 100, 'reference': 'wb-ref-1'},
        })

        response = self.client.get('/payments/callback/', {'reference': 'wb-ref-1'})

        self.assertEqual(response.status_code, 400)
        self.payment.refresh_from_db()
        self.job.refresh_from_db()
        self.assertEqual(self.payment.status, 'failed')
        self.assertEqual(self.job.escrow_status, 'unpaid')

    @patch('apps.payments.utils.requests.get')
    def test_already_paid_is_idempotent(self, mock_get):
        self.payment.mark_paid({'status': 'success'})

        response = self.client.get('/payments/callback/', {'reference': 'wb-ref-1'})

        self.assertEqual(response.status_code, 200)
        mock_get.assert_not_called()

    def test_missing_reference(self):
        response = self.client.get('/payments/callback/')

        self.assertEqual(response.status_code, 400)

    def test_job_mismatch_rejected(self):
        response = self.client.get('/payments/callback/', {'reference': 'wb-ref-1', 'jobId': self.job.id + 1})

        self.assertEqual(response.status_code, 400)


class PaystackWebhookTest(PaymentTestBase):
    def setUp(self):
        super().setUp()
        self.payment = self.create_payment()

    def post_event(self, event, signature=None):
        body = json.dumps(event).encode('utf-8')
        if signature is None:
            signature = hmac.new(SECRET.encode('utf-8'), body, hashlib.sha512).hexdigest()
        return self.client.post(
            '/payments/webhook/', data=body, content_type='application/json',
            HTTP_X_PAYSTACK_SIGNATURE=signature
        )

    def test_signature_check(self):
        body = b'{"event": "charge.success"}'
        good = hmac.new(SECRET.encode('utf-8'), body, hashlib.sha512).hexdigest()

        self.assertTrue(is_valid_signature(body, good))
        self.assertFalse(is_valid_signature(body, 'forged'))
        self.assertFalse(is_valid_signature(body, None))

    def test_invalid_signature_rejected(self):
        response = self.post_event({'event': 'charge.success', 'data': {}}, signature='forged')

        self.assertEqual(response.status_code, 401)

    def test_charge_success_settles_payment(self):
        response = self.post_event({
            'event': 'charge.success',
            'data': {'status': 'success', 'amount': 105000, 'reference': 'wb-ref-1'},
        })

        self.assertEqual(response.status_code, 200)
        self.payment.refresh_from_db()
        self.job.refresh_from_db()
        self.assertEqual(self.payment.status, 'paid')
        self.assertEqual(self.job.escrow_status, 'paid')

    def test_other_events_ignored(self):
        response = self.post_event({'event': 'transfer.success', 'data': {'reference': 'wb-ref-1'}})

        self.assertEqual(response.status_code, 200)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, 'pending')

    def test_unknown_reference(self):
        response = self.post_event({
            'event': 'charge.success',
            'data': {'status': 'success', 'amount': 105000, 'reference': 'nope'},
        })

        self.assertEqual(response.status_code, 404)


class PaymentHistoryTest(PaymentTestBase):
    def test_history_lists_own_payments(self):
        self.create_payment('wb-ref-1')
        self.create_payment('wb-ref-2')
        other = User.objects.create_user(username='other', email='other@example.com', password=PASSWORD, name='Other')
        other_job = Job.objects.create(customer=other, title='Other', description='d')
        Payment.objects.create(
            job=other_job, customer=other, amount=Decimal('1'), total_amount=Decimal('1'), reference='wb-other'
        )
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/payments/history/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([p['reference'] for p in response.data], ['wb-ref-2', 'wb-ref-1'])
