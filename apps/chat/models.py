from django.db import models
from django.conf import settings
from django.utils import timezone
from apps.jobs.models import Job
from core.constants import PROPOSAL_STATUS_CHOICES, MESSAGE_TYPE_CHOICES


class ChatRoom(models.Model):
    # "{job_id}_{worker_id}", one negotiation pairing per job and worker
    id = models.CharField(primary_key=True, max_length=64, editable=False)
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='chat_rooms')
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='customer_chat_rooms')
    worker = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='worker_chat_rooms')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']
        unique_together = ('job', 'worker')

    def __str__(self):
        return f"Chat {self.id} - {self.job.title}"

    @staticmethod
    def room_id_for(job, worker):
        return f"{job.pk}_{worker.pk}"

    @classmethod
    def open_for(cls, job, worker):
        return cls.objects.get_or_create(
            id=cls.room_id_for(job, worker),
            defaults={'job': job, 'customer': job.customer, 'worker': worker},
        )

    @property
    def participant_ids(self):
        return (self.customer_id, self.worker_id)

    def is_participant(self, user):
        return user.pk in self.participant_ids

    def other_participant(self, user):
        return self.worker if user.pk == self.customer_id else self.customer

    @property
    def is_hired(self):
        return self.job.selected_worker_id == self.worker_id

    @property
    def contact_unlocked(self):
        return self.is_hired and self.job.is_escrow_funded

    @property
    def state(self):
        if self.job.status == 'completed':
            return 'completed'
        if self.is_hired:
            return 'contract'
        return 'negotiation'


class Proposal(models.Model):
    room = models.ForeignKey(ChatRoom, on_delete=models.CASCADE, related_name='proposals')
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='proposals')
    proposed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='proposals')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=10, choices=PROPOSAL_STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"Proposal {self.amount} on {self.job.title} ({self.status})"

    def respond(self, accepted):
        self.status = 'accepted' if accepted else 'rejected'
        self.responded_at = timezone.now()
        self.save(update_fields=['status', 'responded_at'])


class Message(models.Model):
    room = models.ForeignKey(ChatRoom, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sent_messages')
    text = models.TextField()
    message_type = models.CharField(max_length=10, choices=MESSAGE_TYPE_CHOICES, default='text')
    proposal = models.ForeignKey(Proposal, on_delete=models.SET_NULL, null=True, blank=True, related_name='messages')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['room', 'created_at'], name='chat_msg_room_created_idx'),
        ]

    def __str__(self):
        return f"Message {self.id} from {self.sender} in {self.room_id}"
