from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from rest_framework.test import APIClient

from apps.chat.models import ChatRoom, Message, Proposal
from apps.chat.utils import find_contact_detail, contains_contact_details
from apps.jobs.models import Job

User = get_user_model()

PASSWORD = "Str0ngPass!x"


class ContactFilterTest(TestCase):
    def test_detects_contact_details(self):
        cases = {
            'mail me at ada.o@gmail.com': 'email',
            'ada (at) gmail.com': 'email',
            'call 0803 123 4567 tomorrow': 'phone',
            'my line is +234-803-123-4567': 'phone',
            'see https://example.org/portfolio': 'link',
            'visit www.myshop.ng': 'link',
            'portfolio at adaworks.com': 'link',
            'message me on WhatsApp': 'social',
            'find me on telegram': 'social',
            'follow @ada_builds': 'handle',
        }
        for text, kind in cases.items():
            with self.subTest(text=text):
                self.assertEqual(find_contact_detail(text), kind)

    def test_allows_ordinary_negotiation(self):
        for text in [
            'I can do it for 15000 naira',
            'Available on the 12th at 3pm',
            'The job needs 2 bags of cement and 30 tiles',
            'Deal, see you soon.',
            'I can do it for 1500000.00',
            'Come 19/10/2024 10am',
        ]:
            with self.subTest(text=text):
                self.assertFalse(contains_contact_details(text))


class ChatTestMixin:
    def setUp(self):
        self.client = APIClient()
        self.customer = User.objects.create_user(
            username='cust', email='cust@example.com', password=PASSWORD,
            name='Cust', phone_number='+2348011111111', location='Ikeja'
        )
        self.worker = User.objects.create_user(
            username='work', email='work@example.com', password=PASSWORD,
            name='Work', account_type='worker', phone_number='+2348022222222', location='Yaba'
        )
        self.outsider = User.objects.create_user(
            username='out', email='out@example.com', password=PASSWORD, name='Out', account_type='worker'
        )
        self.job = Job.objects.create(customer=self.customer, title='Tile bathroom', description='20 sqm')
        self.room, _ = ChatRoom.open_for(self.job, self.worker)

    def url(self, suffix=''):
        return f'/chat/rooms/{self.room.id}/{suffix}'


class OpenRoomTest(ChatTestMixin, TestCase):
    def test_room_id_combines_job_and_worker(self):
        self.assertEqual(self.room.id, f'{self.job.id}_{self.worker.id}')
        self.assertEqual(self.room.customer, self.customer)

    def test_worker_opens_room(self):
        self.client.force_authenticate(user=self.outsider)

        response = self.client.post(f'/chat/jobs/{self.job.id}/rooms/')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['id'], f'{self.job.id}_{self.outsider.id}')
        self.assertEqual(response.data['state'], 'negotiation')

    def test_reopening_returns_existing_room(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(f'/chat/jobs/{self.job.id}/rooms/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(ChatRoom.objects.count(), 1)

    def test_customer_opens_room_with_worker(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(f'/chat/jobs/{self.job.id}/rooms/', {'worker_id': self.outsider.id}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['worker']['id'], self.outsider.id)

    def test_other_customer_cannot_open_room(self):
        stranger = User.objects.create_user(username='str', email='str@example.com', password=PASSWORD, name='Str')
        self.client.force_authenticate(user=stranger)

        response = self.client.post(f'/chat/jobs/{self.job.id}/rooms/', {'worker_id': self.worker.id}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_closed_job_cannot_get_new_rooms(self):
        self.job.hire(self.worker, Decimal('100'))
        self.client.force_authenticate(user=self.outsider)

        response = self.client.post(f'/chat/jobs/{self.job.id}/rooms/')

        self.assertEqual(response.status_code, 400)


class RoomAccessTest(ChatTestMixin, TestCase):
    def test_room_list_shows_participants_rooms(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/chat/rooms/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['other_participant']['id'], self.worker.id)
        self.assertEqual(response.data[0]['job_title'], 'Tile bathroom')

    def test_non_participant_is_denied(self):
        self.client.force_authenticate(user=self.outsider)

        response = self.client.get(self.url())

        self.assertEqual(response.status_code, 403)
        self.assertIn('Access Denied', response.data['detail'])

    def test_unknown_room_is_not_found(self):
        self.client.force_authenticate(user=self.customer)

        response = self.client.get('/chat/rooms/999_999/')

        self.assertEqual(response.status_code, 404)


class MessageTest(ChatTestMixin, TestCase):
    def test_send_and_read_messages(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(self.url('messages/'), {'text': '  Hello, I can help  '}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['text'], 'Hello, I can help')
        self.assertEqual(response.data['sender_id'], self.worker.id)

        self.client.force_authenticate(user=self.customer)
        response = self.client.get(self.url('messages/'))
        self.assertEqual([m['text'] for m in response.data], ['Hello, I can help'])

    def test_blank_message_rejected(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(self.url('messages/'), {'text': '   '}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_contact_details_blocked_before_payment(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(self.url('messages/'), {'text': 'Call me on 08031234567'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('escrow', str(response.data['text'][0]))
        self.assertFalse(Message.objects.exists())

    def test_contact_details_allowed_after_payment(self):
        self.job.hire(self.worker, Decimal('100'))
        self.job.escrow_status = 'paid'
        self.job.save()
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(self.url('messages/'), {'text': 'Call me on 08031234567'}, format='json')

        self.assertEqual(response.status_code, 201)

    def test_contact_details_blocked_for_workers_not_hired(self):
        self.job.hire(self.worker, Decimal('100'))
        self.job.escrow_status = 'paid'
        self.job.save()
        other_room, _ = ChatRoom.open_for(self.job, self.outsider)
        self.client.force_authenticate(user=self.outsider)

        response = self.client.post(
            f'/chat/rooms/{other_room.id}/messages/', {'text': 'call me 08031234567'}, format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(other_room.messages.exists())

    def test_history_returns_latest_hundred_in_order(self):
        for i in range(105):
            Message.objects.create(room=self.room, sender=self.worker, text=f'm{i}')
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.url('messages/'))

        self.assertEqual(len(response.data), 100)
        self.assertEqual(response.data[0]['text'], 'm5')
        self.assertEqual(response.data[-1]['text'], 'm104')

    def test_non_participant_cannot_post(self):
        self.client.force_authenticate(user=self.outsider)

        response = self.client.post(self.url('messages/'), {'text': 'hi'}, format='json')

        self.assertEqual(response.status_code, 403)


class ProposalAndHireTest(ChatTestMixin, TestCase):
    def propose(self, user, amount):
        self.client.force_authenticate(user=user)
        return self.client.post(self.url('proposals/'), {'amount': amount}, format='json')

    def test_new_proposal_withdraws_pending_one(self):
        first = self.propose(self.worker, '5000.00')
        second = self.propose(self.customer, '4500.00')

        self.assertEqual(first.status_code, 201)
        self.assertEqual(second.status_code, 201)
        self.assertEqual(Proposal.objects.get(pk=first.data['id']).status, 'withdrawn')
        self.assertEqual(Proposal.objects.get(pk=second.data['id']).status, 'pending')
        self.assertEqual(
            list(self.room.messages.values_list('message_type', flat=True)),
            ['proposal', 'proposal']
        )

    def test_proposal_amount_must_be_positive(self):
        response = self.propose(self.worker, '0')

        self.assertEqual(response.status_code, 400)

    def test_cannot_respond_to_own_proposal(self):
        proposal_id = self.propose(self.worker, '5000').data['id']

        response = self.client.post(self.url(f'proposals/{proposal_id}/respond/'), {'status': 'accepted'}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_hire_requires_accepted_proposal(self):
        self.propose(self.worker, '5000')
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.url('hire/'))

        self.assertEqual(response.status_code, 400)
        self.job.refresh_from_db()
        self.assertEqual(self.job.status, 'open')

    def test_accept_then_hire(self):
        proposal_id = self.propose(self.worker, '5000.00').data['id']
        self.client.force_authenticate(user=self.customer)

        response = self.client.post(self.url(f'proposals/{proposal_id}/respond/'), {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['status'], 'accepted')

        response = self.client.post(self.url('hire/'))

        self.assertEqual(response.status_code, 200)
        self.job.refresh_from_db()
        self.assertEqual(self.job.status, 'in_progress')
        self.assertEqual(self.job.selected_worker, self.worker)
        self.assertEqual(self.job.total_price, Decimal('5000.00'))
        self.assertEqual(self.job.commission_amount, Decimal('250.00'))
        self.assertEqual(self.job.worker_payout, Decimal('5000.00'))
        self.assertEqual(mail.outbox[-1].to, ['work@example.com'])

        response = self.client.get(self.url())
        self.assertEqual(response.data['state'], 'contract')
        self.assertFalse(response.data['contact_unlocked'])

    def test_worker_cannot_hire(self):
        self.client.force_authenticate(user=self.worker)

        response = self.client.post(self.url('hire/'))

        self.assertEqual(response.status_code, 403)

    def test_proposals_closed_after_hire(self):
        self.job.hire(self.worker, Decimal('100'))

        response = self.propose(self.worker, '200')

        self.assertEqual(response.status_code, 400)


class ContactDetailsTest(ChatTestMixin, TestCase):
    def test_locked_until_escrow_paid(self):
        self.job.hire(self.worker, Decimal('100'))
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.url('contact/'))

        self.assertEqual(response.status_code, 403)

    def test_unlocked_after_payment(self):
        self.job.hire(self.worker, Decimal('100'))
        self.job.escrow_status = 'paid'
        self.job.save()
        self.client.force_authenticate(user=self.customer)

        response = self.client.get(self.url('contact/'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['phone_number'], '+2348022222222')
        self.assertEqual(response.data['location'], 'Yaba')
