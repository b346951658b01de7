from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase, override_settings
from rest_framework.test import APIClient

from apps.jobs.models import Job
from apps.jobs.utils import send_notification

User = get_user_model()

PASSWORD = "Str0ngPass!x"


class JobModelTest(TestCase):
    def setUp(self):
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )
        self.job = Job.objects.create(customer=self.customer, title='Fix sink', description='Leaking')

    def test_hire_splits_commission(self):
        self.job.hire(self.worker, Decimal('1000.00'))

        self.assertEqual(self.job.status, 'in_progress')
        self.assertEqual(self.job.selected_worker, self.worker)
        self.assertEqual(self.job.total_price, Decimal('1000.00'))
        self.assertEqual(self.job.commission_amount, Decimal('50.00'))
        self.assertEqual(self.job.worker_payout, Decimal('1000.00'))
        self.assertTrue(self.job.can_be_paid())

    def test_commission_rounds_to_two_places(self):
        self.job.hire(self.worker, Decimal('333.33'))

        self.assertEqual(self.job.commission_amount, Decimal('16.67'))

    def test_completion_requires_funded_escrow(self):
        self.job.hire(self.worker, Decimal('500'))
        self.assertFalse(self.job.can_be_completed())

        self.job.escrow_status = 'paid'
        self.assertTrue(self.job.can_be_completed())
        self.job.mark_completed()

        self.assertEqual(self.job.status, 'completed')
        self.assertEqual(self.job.escrow_status, 'released')


class JobApiTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )

    def test_customer_posts_job(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post('/jobs/jobs/create/', {
            'title': '  Paint the fence ',
            'description': 'White paint, two coats',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['title'], 'Paint the fence')
        self.assertEqual(response.data['status'], 'open')
        self.assertEqual(response.data['escrow_status'], 'unpaid')
        self.assertEqual(response.data['customer']['id'], self.customer.id)

    def test_worker_cannot_post_job(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post('/jobs/jobs/create/', {'title': 'x', 'description': 'y'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_list_filters_by_status(self):
        Job.objects.create(customer=self.customer, title='Open one', description='d')
        done = Job.objects.create(customer=self.customer, title='Done one', description='d', status='completed')
        self.client.force_authenticate(user=self.worker)

        response = self.client.get('/jobs/jobs/', {'status': 'completed'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([j['id'] for j in response.data], [done.id])

    def test_job_detail(self):
        job = Job.objects.create(customer=self.customer, title='Fix roof', description='d')
        self.client.force_authenticate(user=self.worker)

        response = self.client.get(f'/jobs/jobs/{job.id}/details/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['title'], 'Fix roof')
        self.assertIsNone(response.data['selected_worker'])


class DashboardTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )
        done = Job.objects.create(customer=self.customer, title='Done', description='d')
        done.hire(self.worker, Decimal('200.00'))
        done.mark_completed()
        active = Job.objects.create(customer=self.customer, title='Active', description='d')
        active.hire(self.worker, Decimal('300.00'))
        for i in range(8):
            Job.objects.create(customer=self.customer, title=f'Open {i}', description='d')

    def test_customer_dashboard(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/jobs/customer/dashboard/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['active_jobs'], 1)
        self.assertEqual(response.data['open_jobs'], 8)
        self.assertEqual(response.data['completed_jobs'], 1)
        self.assertEqual(response.data['total_spent'], '200.00')
        self.assertEqual(len(response.data['jobs']), 10)

    def test_worker_dashboard(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.get('/jobs/worker/dashboard/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data['jobs']), 2)
        self.assertEqual(len(response.data['open_jobs']), 6)
        self.assertEqual(response.data['total_earnings'], '200.00')
        self.assertEqual(response.data['success_rate'], 50)

    def test_dashboards_are_role_scoped(self):
        self.client.force_authenticate(user=self.worker)
        self.assertEqual(self.client.get('/jobs/customer/dashboard/').status_code, 403)

        self.client.force_authenticate(user=self.customer)
        self.assertEqual(self.client.get('/jobs/worker/dashboard/').status_code, 403)

    def test_worker_without_jobs_has_zero_success_rate(self):
        newcomer = User.objects.create_user(
            username='new', email='new@example.com', password=PASSWORD, name='New', account_type='worker'
        )
        self.client.force_authenticate(user=newcomer)

        response = self.client.get('/jobs/worker/dashboard/')

        self.assertEqual(response.data['success_rate'], 0)
        self.assertEqual(response.data['total_earnings'], '0.00')


class JobCompleteTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )
        self.job = Job.objects.create(customer=self.customer, title='Fix sink', description='d')
        self.job.hire(self.worker, Decimal('1000'))
        self.client.force_authenticate(user=self.customer)

    def test_cannot_complete_before_payment(self):
        response = self.client.post(f'/jobs/jobs/{self.job.id}/complete/')

        self.assertEqual(response.status_code, 400)

    def test_complete_releases_escrow_and_notifies_worker(self):
        self.job.escrow_status = 'paid'
        self.job.save()

        response = self.client.post(f'/jobs/jobs/{self.job.id}/complete/')

        self.assertEqual(response.status_code, 200)
        self.job.refresh_from_db()
        self.assertEqual(self.job.status, 'completed')
        self.assertEqual(self.job.escrow_status, 'released')
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['work@example.com'])

    def test_other_customer_gets_not_found(self):
        other = User.objects.create_user(username='other', email='other@example.com', password=PASSWORD, name='Other')
        self.client.force_authenticate(user=other)

        response = self.client.post(f'/jobs/jobs/{self.job.id}/complete/')

        self.assertEqual(response.status_code, 404)


class SendNotificationTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username='notify', email='notify@example.com', password=PASSWORD,
            name='Notify', phone_number='+2348012345678'
        )

    def test_email_only_when_twilio_unconfigured(self):
        with patch('apps.jobs.utils.TwilioClient') as twilio:
            send_notification(self.user, 'Subject', 'Body', 'SMS')

        self.assertEqual(len(mail.outbox), 1)
        twilio.assert_not_called()

    @override_settings(TWILIO_ACCOUNT_SID='AC123', TWILIO_AUTH_TOKEN='token', TWILIO_PHONE_NUMBER='+15550000000')
    def test_sms_sent_when_configured(self):
        with patch('apps.jobs.utils.TwilioClient') as twilio:
            send_notification(self.user, 'Subject', 'Body', 'SMS')

        twilio.return_value.messages.create.assert_called_once_with(
            body='SMS', from_='+15550000000', to='+2348012345678'
        )

    @override_settings(TWILIO_ACCOUNT_SID='AC123')
    def test_invalid_phone_number_skips_sms(self):
        self.user.phone_number = '08012345678'

        with patch('apps.jobs.utils.TwilioClient') as twilio:
            send_notification(self.user, 'Subject', 'Body', 'SMS')

        twilio.assert_not_called()
