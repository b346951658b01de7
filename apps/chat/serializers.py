from decimal import Decimal
from rest_framework import serializers
from .models import ChatRoom, Message, Proposal
from .utils import find_contact_detail, CONTACT_BLOCKED_MESSAGE
from apps.users.serializers import PublicUserSerializer
import logging

logger = logging.getLogger(__name__)


class ProposalSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    proposed_by = PublicUserSerializer(read_only=True)

    class Meta:
        model = Proposal
        fields = ['id', 'room', 'job', 'proposed_by', 'amount', 'status', 'created_at', 'responded_at']
        read_only_fields = ['id', 'room', 'job', 'proposed_by', 'status', 'created_at', 'responded_at']

    def validate(self, data):
        room = self.context['room']
        if room.job.status != 'open':
            raise serializers.ValidationError("Price proposals are only possible while the job is open.")
        return data

    def create(self, validated_data):
        room = self.context['room']
        user = self.context['request'].user
        # A newer offer replaces whatever is still pending in this room
        room.proposals.filter(status='pending').update(status='withdrawn')
        proposal = Proposal.objects.create(
            room=room,
            job=room.job,
            proposed_by=user,
            amount=validated_data['amount'],
        )
        Message.objects.create(
            room=room,
            sender=user,
            text=f"Offered price: {proposal.amount}",
            message_type='proposal',
            proposal=proposal,
        )
        return proposal


class ProposalResponseSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['accepted', 'rejected'])

    def validate(self, data):
        proposal = self.context['proposal']
        user = self.context['request'].user
        if proposal.status != 'pending':
            raise serializers.ValidationError("This proposal has already been processed.")
        if proposal.proposed_by_id == user.pk:
            raise serializers.ValidationError("You cannot respond to your own proposal.")
        return data

    def save(self):
        proposal = self.context['proposal']
        user = self.context['request'].user
        accepted = self.validated_data['status'] == 'accepted'
        proposal.respond(accepted)
        Message.objects.create(
            room=proposal.room,
            sender=user,
            text=f"{user.name} {proposal.status} the offer of {proposal.amount}",
            message_type='system',
            proposal=proposal,
        )
        return proposal


class MessageSerializer(serializers.ModelSerializer):
    sender_id = serializers.ReadOnlyField(source='sender.id')
    text = serializers.CharField(trim_whitespace=True, allow_blank=False, max_length=2000)

    class Meta:
        model = Message
        fields = ['id', 'room', 'sender_id', 'text', 'message_type', 'proposal', 'created_at']
        read_only_fields = ['id', 'room', 'sender_id', 'message_type', 'proposal', 'created_at']

    def validate_text(self, value):
        room = self.context['room']
        if not room.contact_unlocked:
            kind = find_contact_detail(value)
            if kind:
                logger.warning(
                    f"Blocked {kind} in message from user {self.context['request'].user.id} in room {room.id}"
                )
                raise serializers.ValidationError(CONTACT_BLOCKED_MESSAGE)
        return value

    def create(self, validated_data):
        room = self.context['room']
        message = Message.objects.create(
            room=room,
            sender=self.context['request'].user,
            text=validated_data['text'],
        )
        # Bump the room so recent conversations sort first
        room.save(update_fields=['updated_at'])
        return message


class ChatRoomSerializer(serializers.ModelSerializer):
    job_title = serializers.ReadOnlyField(source='job.title')
    job_status = serializers.ReadOnlyField(source='job.status')
    escrow_status = serializers.ReadOnlyField(source='job.escrow_status')
    customer = PublicUserSerializer(read_only=True)
    worker = PublicUserSerializer(read_only=True)
    other_participant = serializers.SerializerMethodField()
    state = serializers.ReadOnlyField()
    contact_unlocked = serializers.ReadOnlyField()
    latest_proposal = serializers.SerializerMethodField()

    class Meta:
        model = ChatRoom
        fields = [
            'id', 'job', 'job_title', 'job_status', 'escrow_status', 'customer', 'worker',
            'other_participant', 'state', 'contact_unlocked', 'latest_proposal',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_other_participant(self, obj):
        request = self.context.get('request')
        if not request:
            return None
        return PublicUserSerializer(obj.other_participant(request.user)).data

    def get_latest_proposal(self, obj):
        proposal = obj.proposals.first()
        if not proposal:
            return None
        return {
            'id': proposal.id,
            'amount': str(proposal.amount),
            'status': proposal.status,
            'proposed_by': proposal.proposed_by_id,
        }


class ContactDetailsSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone_number = serializers.CharField(allow_null=True)
    location = serializers.CharField(allow_null=True)
