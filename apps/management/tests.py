from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from rest_framework.test import APIClient

from apps.jobs.models import Job
from apps.management.models import ManagementLog
from apps.payments.models import Payment

User = get_user_model()

PASSWORD = "Str0ngPass!x"


class ManagementTestBase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_superuser(
            username='root', email='root@example.com', password=PASSWORD, name='Root'
        )
        self.customer = User.objects.create_user(username='cust', email='cust@example.com', password=PASSWORD, name='Cust')
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD, name='Work', account_type='worker'
        )
        self.client.force_authenticate(user=self.admin)


class AdminAccessTest(ManagementTestBase):
    def test_non_admin_denied(self):
        self.client.force_authenticate(user=self.customer)

        for url in ['/management/dashboard/', '/management/users/', '/management/jobs/', '/management/payments/']:
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 403)


class DashboardTest(ManagementTestBase):
    def test_dashboard_totals(self):
        done = Job.objects.create(customer=self.customer, title='Done', description='d')
        done.hire(self.worker, Decimal('1000.00'))
        done.mark_completed()
        active = Job.objects.create(customer=self.customer, title='Active', description='d')
        active.hire(self.worker, Decimal('200.00'))
        Payment.objects.create(
            job=done, customer=self.customer, amount=Decimal('1000.00'), service_fee=Decimal('50.00'),
            total_amount=Decimal('1050.00'), reference='paid-1', status='paid'
        )
        Payment.objects.create(
            job=active, customer=self.customer, amount=Decimal('200.00'), service_fee=Decimal('10.00'),
            total_amount=Decimal('210.00'), reference='pending-1'
        )

        response = self.client.get('/management/dashboard/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total_revenue'], '1000.00')
        self.assertEqual(response.data['platform_commission'], '60.00')
        self.assertEqual(response.data['active_jobs'], 1)
        self.assertEqual(response.data['completed_jobs'], 1)
        self.assertEqual(response.data['total_workers'], 1)

    def test_empty_dashboard(self):
        response = self.client.get('/management/dashboard/')

        self.assertEqual(response.data['total_revenue'], '0.00')
        self.assertEqual(response.data['platform_commission'], '0.00')


class UserManagementTest(ManagementTestBase):
    def test_list_filters_by_account_type(self):
        response = self.client.get('/management/users/', {'account_type': 'worker'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([u['id'] for u in response.data], [self.worker.id])

    def test_suspend_worker(self):
        response = self.client.post(f'/management/users/{self.worker.id}/suspend/')

        self.assertEqual(response.status_code, 200)
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.status, 'suspended')
        self.assertFalse(self.worker.is_active)
        log = ManagementLog.objects.get()
        self.assertEqual(log.action, 'suspend_worker')
        self.assertEqual(log.admin, self.admin)
        self.assertEqual(mail.outbox[0].to, ['work@example.com'])

    def test_approve_restores_worker(self):
        self.worker.status = 'suspended'
        self.worker.is_active = False
        self.worker.save()

        response = self.client.post(f'/management/users/{self.worker.id}/approve/')

        self.assertEqual(response.status_code, 200)
        self.worker.refresh_from_db()
        self.assertEqual(self.worker.status, 'approved')
        self.assertTrue(self.worker.is_active)

    def test_only_workers_can_be_suspended(self):
        response = self.client.post(f'/management/users/{self.customer.id}/suspend/')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(ManagementLog.objects.exists())

    def test_logs_are_listed(self):
        self.client.post(f'/management/users/{self.worker.id}/suspend/')

        response = self.client.get('/management/management-logs/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]['action'], 'suspend_worker')


class ReadOnlyListsTest(ManagementTestBase):
    def test_jobs_newest_first_and_capped(self):
        for i in range(105):
            Job.objects.create(customer=self.customer, title=f'Job {i}', description='d')

        response = self.client.get('/management/jobs/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 100)
        self.assertEqual(response.data[0]['title'], 'Job 104')

    def test_jobs_are_read_only(self):
        job = Job.objects.create(customer=self.customer, title='Job', description='d')

        response = self.client.delete(f'/management/jobs/{job.id}/')

        self.assertEqual(response.status_code, 405)

    def test_payments_most_recently_paid_first(self):
        job = Job.objects.create(customer=self.customer, title='Job', description='d')
        first = Payment.objects.create(
            job=job, customer=self.customer, amount=Decimal('1'), total_amount=Decimal('1'), reference='first'
        )
        second = Payment.objects.create(
            job=job, customer=self.customer, amount=Decimal('1'), total_amount=Decimal('1'), reference='second'
        )
        first.mark_paid({})
        second.mark_paid({})
        Payment.objects.create(
            job=job, customer=self.customer, amount=Decimal('1'), total_amount=Decimal('1'), reference='unpaid'
        )

        response = self.client.get('/management/payments/')

        self.assertEqual([p['reference'] for p in response.data], ['second', 'first', 'unpaid'])
