from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

User = get_user_model()

PASSWORD = "Str0ngPass!x"


class SignupTest(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_returns_token_and_dashboard(self):
        response = self.client.post('/users/auth/signup/', {
            'name': 'Ada Okafor',
            'email': 'Ada@Example.com',
            'password': PASSWORD,
            'account_type': 'worker',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertIn('token', response.data)
        self.assertEqual(response.data['user']['email'], 'ada@example.com')
        self.assertEqual(response.data['user']['dashboard'], 'worker-dashboard')
        self.assertEqual(response.data['user']['status'], 'approved')

    def test_username_is_deduplicated(self):
        User.objects.create_user(username='ada', email='ada@other.com', password=PASSWORD, name='Ada')

        response = self.client.post('/users/auth/signup/', {
            'name': 'Ada Two',
            'email': 'ada@example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['user']['username'], 'ada1')
        self.assertEqual(response.data['user']['account_type'], 'customer')

    def test_short_password_rejected(self):
        response = self.client.post('/users/auth/signup/', {
            'name': 'Ada Okafor',
            'email': 'ada@example.com',
            'password': 'abc',
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('password', response.data)

    def test_duplicate_email_rejected(self):
        User.objects.create_user(username='taken', email='ada@example.com', password=PASSWORD, name='Ada')

        response = self.client.post('/users/auth/signup/', {
            'name': 'Ada Okafor',
            'email': 'ADA@example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('email', response.data)


class LoginTest(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='bola', email='bola@example.com', password=PASSWORD,
            name='Bola', account_type='seller'
        )

    def test_login_with_email(self):
        response = self.client.post('/users/auth/login/', {
            'identifier': 'BOLA@example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['user']['dashboard'], 'shops/manage')
        self.assertTrue(Token.objects.filter(user=self.user, key=response.data['token']).exists())

    def test_login_with_username(self):
        response = self.client.post('/users/auth/login/', {'identifier': 'bola', 'password': PASSWORD}, format='json')

        self.assertEqual(response.status_code, 200)

    def test_wrong_password(self):
        response = self.client.post('/users/auth/login/', {'identifier': 'bola', 'password': 'nope'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('Incorrect password.', response.data['non_field_errors'])

    def test_lockout_after_five_failures(self):
        for _ in range(5):
            self.client.post('/users/auth/login/', {'identifier': 'bola', 'password': 'nope'}, format='json')

        response = self.client.post('/users/auth/login/', {'identifier': 'bola', 'password': PASSWORD}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('Too many login attempts', response.data['non_field_errors'][0])

    def test_suspended_user_cannot_login(self):
        self.user.status = 'suspended'
        self.user.save()

        response = self.client.post('/users/auth/login/', {'identifier': 'bola', 'password': PASSWORD}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('suspended', response.data['non_field_errors'][0])

    def test_logout_deletes_token(self):
        token = Token.objects.create(user=self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = self.client.post('/users/auth/logout/')

        self.assertEqual(response.status_code, 204)
        self.assertFalse(Token.objects.filter(user=self.user).exists())


class ProfileTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username='chidi', email='chidi@example.com', password=PASSWORD, name='Chidi'
        )
        self.client.force_authenticate(user=self.user)

    def test_get_profile(self):
        response = self.client.get('/users/profile/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['dashboard'], 'customer-dashboard')
        self.assertFalse(response.data['is_admin'])

    def test_update_profile_ignores_read_only_fields(self):
        response = self.client.put('/users/profile/', {
            'phone_number': '+2348012345678',
            'location': 'Lagos',
            'account_type': 'worker',
            'status': 'suspended',
        }, format='json')

        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.location, 'Lagos')
        self.assertEqual(self.user.account_type, 'customer')
        self.assertEqual(self.user.status, 'approved')

    def test_profile_requires_authentication(self):
        self.client.force_authenticate(user=None)

        response = self.client.get('/users/profile/')

        self.assertEqual(response.status_code, 401)


class WorkerListTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.viewer = User.objects.create_user(username='viewer', email='viewer@example.com', password=PASSWORD, name='Viewer')
        User.objects.create_user(
            username='plumber', email='plumber@example.com', password=PASSWORD,
            name='Emeka', account_type='worker', bio='Plumbing and pipe repairs', location='Abuja'
        )
        User.objects.create_user(
            username='painter', email='painter@example.com', password=PASSWORD,
            name='Funmi', account_type='worker', bio='Interior painting', location='Lagos'
        )
        User.objects.create_user(
            username='banned', email='banned@example.com', password=PASSWORD,
            name='Gbenga', account_type='worker', status='suspended'
        )
        self.client.force_authenticate(user=self.viewer)

    def test_lists_only_approved_workers(self):
        response = self.client.get('/users/workers/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([w['name'] for w in response.data], ['Emeka', 'Funmi'])

    def test_search(self):
        response = self.client.get('/users/workers/', {'q': 'lagos'})

        self.assertEqual([w['name'] for w in response.data], ['Funmi'])
