from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.contrib.auth import get_user_model
from django.db.models import Q
from .models import ChatRoom, Message, Proposal
from .serializers import (
    ChatRoomSerializer, MessageSerializer, ProposalSerializer,
    ProposalResponseSerializer, ContactDetailsSerializer
)
from apps.jobs.models import Job
from apps.jobs.serializers import JobSerializer
from apps.jobs.utils import send_notification
from core.constants import ROOM_LIST_LIMIT, MESSAGE_HISTORY_LIMIT
from core.utils import IsCustomer
import logging

User = get_user_model()
logger = logging.getLogger(__name__)


class RoomAccessMixin:
    def get_room(self, request, room_id):
        try:
            room = ChatRoom.objects.select_related('job', 'customer', 'worker').get(pk=room_id)
        except ChatRoom.DoesNotExist:
            raise NotFound("Chat room not found")
        if not room.is_participant(request.user):
            raise PermissionDenied("Access Denied. You must be a participant in this job's chat to view this page.")
        return room


class ChatRoomListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the conversations the current user takes part in.",
        responses={200: ChatRoomSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        rooms = ChatRoom.objects.filter(
            Q(customer=request.user) | Q(worker=request.user)
        ).select_related('job', 'customer', 'worker')[:ROOM_LIST_LIMIT]
        serializer = ChatRoomSerializer(rooms, many=True, context={'request': request})
        return Response(serializer.data)


class ChatRoomOpenView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description=(
            "Open the negotiation room for a job. Workers open their own pairing; "
            "the job's customer names the worker to contact."
        ),
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'worker_id': openapi.Schema(type=openapi.TYPE_INTEGER, description='Required when the customer opens the room')
            },
        ),
        responses={
            200: ChatRoomSerializer,
            201: ChatRoomSerializer,
            400: 'Bad Request',
            403: 'Forbidden',
            404: 'Not Found'
        }
    )
    def post(self, request, job_id):
        try:
            job = Job.objects.select_related('customer').get(pk=job_id)
        except Job.DoesNotExist:
            return Response({"error": "Job not found"}, status=status.HTTP_404_NOT_FOUND)

        if request.user.is_worker:
            worker = request.user
        elif request.user.pk == job.customer_id:
            try:
                worker = User.objects.get(pk=request.data.get('worker_id'), account_type='worker')
            except (User.DoesNotExist, ValueError, TypeError):
                return Response({"error": "Worker not found"}, status=status.HTTP_404_NOT_FOUND)
        else:
            return Response({"error": "Not authorized to open a chat for this job"}, status=status.HTTP_403_FORBIDDEN)

        existing = ChatRoom.objects.filter(pk=ChatRoom.room_id_for(job, worker)).first()
        if existing:
            serializer = ChatRoomSerializer(existing, context={'request': request})
            return Response(serializer.data, status=status.HTTP_200_OK)

        if job.status != 'open':
            return Response({"error": "This job is no longer open for negotiation"}, status=status.HTTP_400_BAD_REQUEST)
        if worker.is_suspended:
            return Response({"error": "This worker account is suspended"}, status=status.HTTP_400_BAD_REQUEST)

        room, _ = ChatRoom.open_for(job, worker)
        logger.info(f"Chat room {room.id} opened by user {request.user.id}")
        serializer = ChatRoomSerializer(room, context={'request': request})
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class ChatRoomDetailView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: ChatRoomSerializer, 403: 'Forbidden', 404: 'Not Found'})
    def get(self, request, room_id):
        room = self.get_room(request, room_id)
        return Response(ChatRoomSerializer(room, context={'request': request}).data)


class MessageListCreateView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Latest messages of the room in chronological order.",
        responses={200: MessageSerializer(many=True), 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, room_id):
        room = self.get_room(request, room_id)
        latest = list(room.messages.order_by('-created_at', '-id')[:MESSAGE_HISTORY_LIMIT])
        latest.reverse()
        return Response(MessageSerializer(latest, many=True).data)

    @swagger_auto_schema(
        operation_description=(
            "Send a message. Phone numbers, email addresses, links and social handles "
            "are refused until the job's payment is held in escrow."
        ),
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['text'],
            properties={'text': openapi.Schema(type=openapi.TYPE_STRING)},
        ),
        responses={201: MessageSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, room_id):
        room = self.get_room(request, room_id)
        serializer = MessageSerializer(data=request.data, context={'request': request, 'room': room})
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ProposalListCreateView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(responses={200: ProposalSerializer(many=True), 403: 'Forbidden', 404: 'Not Found'})
    def get(self, request, room_id):
        room = self.get_room(request, room_id)
        proposals = room.proposals.select_related('proposed_by')
        return Response(ProposalSerializer(proposals, many=True).data)

    @swagger_auto_schema(
        operation_description="Offer a price for the job. Replaces any pending offer in this room.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['amount'],
            properties={'amount': openapi.Schema(type=openapi.TYPE_NUMBER)},
        ),
        responses={201: ProposalSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, room_id):
        room = self.get_room(request, room_id)
        serializer = ProposalSerializer(data=request.data, context={'request': request, 'room': room})
        if serializer.is_valid():
            proposal = serializer.save()
            logger.info(f"User {request.user.id} proposed {proposal.amount} in room {room.id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ProposalRespondView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Accept or reject the other participant's price proposal.",
        request_body=ProposalResponseSerializer,
        responses={200: ProposalSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, room_id, proposal_id):
        room = self.get_room(request, room_id)
        try:
            proposal = room.proposals.get(pk=proposal_id)
        except Proposal.DoesNotExist:
            return Response({"error": "Proposal not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = ProposalResponseSerializer(
            data=request.data, context={'request': request, 'proposal': proposal}
        )
        if serializer.is_valid():
            proposal = serializer.save()
            return Response(ProposalSerializer(proposal).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class HireWorkerView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Hire the room's worker at the accepted proposal price.",
        responses={200: JobSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, room_id):
        room = self.get_room(request, room_id)
        job = room.job
        if request.user.pk != job.customer_id:
            return Response({"error": "Only the job owner can hire"}, status=status.HTTP_403_FORBIDDEN)
        if job.status != 'open' or job.selected_worker_id:
            return Response({"error": "This job already has a hired worker"}, status=status.HTTP_400_BAD_REQUEST)

        proposal = room.proposals.filter(status='accepted').first()
        if not proposal:
            return Response(
                {"error": "Agree on a price before hiring: no accepted proposal in this chat"},
                status=status.HTTP_400_BAD_REQUEST
            )

        job.hire(room.worker, proposal.amount)
        Message.objects.create(
            room=room,
            sender=request.user,
            text=f"{request.user.name} hired {room.worker.name} for {job.total_price}",
            message_type='system',
            proposal=proposal,
        )
        logger.info(f"Job {job.id} hired worker {room.worker_id} at {job.total_price}")

        # Notify worker
        email_subject = f"You've been hired: {job.title}"
        email_message = (
            f"Dear {room.worker.name},\n\n"
            f"{request.user.name} has hired you for '{job.title}' at {job.total_price}.\n"
            f"Contact details unlock in the chat once the payment is secured in escrow.\n\n"
            f"Best regards,\nWorkBee Team"
        )
        sms_message = f"You've been hired for '{job.title}' at {job.total_price}. Check WorkBee for details."
        send_notification(room.worker, email_subject, email_message, sms_message)

        return Response(JobSerializer(job).data)


class ContactDetailsView(RoomAccessMixin, APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Phone number and location of the other participant, available once escrow is funded.",
        responses={200: ContactDetailsSerializer, 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, room_id):
        room = self.get_room(request, room_id)
        if not room.contact_unlocked:
            return Response(
                {"error": "Calling and location sharing unlock once the payment is held in escrow"},
                status=status.HTTP_403_FORBIDDEN
            )
        other = room.other_participant(request.user)
        serializer = ContactDetailsSerializer({
            'id': other.id,
            'name': other.name,
            'email': other.email,
            'phone_number': other.phone_number,
            'location': other.location,
        })
        return Response(serializer.data)
