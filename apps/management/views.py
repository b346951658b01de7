from decimal import Decimal
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from django.contrib.auth import get_user_model
from django.db.models import F, Sum
from .models import ManagementLog
from .serializers import (
    ManagementUserSerializer, ManagementJobSerializer, ManagementPaymentSerializer,
    ManagementLogSerializer, DashboardStatsSerializer
)
from apps.jobs.models import Job
from apps.jobs.utils import send_notification
from apps.payments.models import Payment
from core.constants import ACCOUNT_TYPE_CHOICES, ADMIN_LIST_LIMIT
from core.utils import IsAdmin
import logging

logger = logging.getLogger(__name__)
User = get_user_model()


class LimitedListMixin:
    """List only the first ADMIN_LIST_LIMIT rows of the queryset."""

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())[:ADMIN_LIST_LIMIT]
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)


class DashboardView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @swagger_auto_schema(
        operation_description="Platform totals for the admin console.",
        responses={200: DashboardStatsSerializer, 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        revenue = Payment.objects.filter(status='paid').aggregate(total=Sum('amount'))['total']
        commission = Job.objects.aggregate(total=Sum('commission_amount'))['total']
        serializer = DashboardStatsSerializer({
            'total_revenue': revenue or Decimal('0.00'),
            'platform_commission': commission or Decimal('0.00'),
            'active_jobs': Job.objects.filter(status='in_progress').count(),
            'completed_jobs': Job.objects.filter(status='completed').count(),
            'total_workers': User.objects.filter(account_type='worker').count(),
        })
        return Response(serializer.data)


class ManagementUserViewSet(LimitedListMixin, viewsets.ReadOnlyModelViewSet):
    """
    Admin API for reviewing accounts and approving or suspending workers.
    Only accessible to admin/superuser accounts.
    """
    serializer_class = ManagementUserSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_queryset(self):
        users = User.objects.order_by('-created_at', '-id')
        account_type = self.request.query_params.get('account_type')
        if account_type:
            users = users.filter(account_type=account_type)
        return users

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter(
                'account_type', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                enum=[choice for choice, _ in ACCOUNT_TYPE_CHOICES]
            )
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def _set_worker_status(self, request, new_status):
        user = self.get_object()
        if not user.is_worker:
            return Response(
                {"error": "Only worker accounts can be approved or suspended"},
                status=status.HTTP_400_BAD_REQUEST
            )
        user.status = new_status
        user.is_active = new_status == 'approved'
        user.save(update_fields=['status', 'is_active'])

        action_name = 'approve_worker' if new_status == 'approved' else 'suspend_worker'
        ManagementLog.objects.create(
            admin=request.user,
            action=action_name,
            details=f"Set worker {user.username} (ID: {user.id}) to {new_status}"
        )
        logger.info(f"Admin {request.user.id} set worker {user.id} status to {new_status}")

        # Notify worker
        if new_status == 'approved':
            email_subject = "Your WorkBee account has been approved"
            email_message = (
                f"Dear {user.name},\n\n"
                f"Your worker account is approved. Customers can now find and hire you.\n\n"
                f"Best regards,\nWorkBee Team"
            )
            sms_message = "Your WorkBee worker account has been approved."
        else:
            email_subject = "Your WorkBee account has been suspended"
            email_message = (
                f"Dear {user.name},\n\n"
                f"Your worker account has been suspended by an administrator.\n"
                f"Reply to this email if you believe this is a mistake.\n\n"
                f"Best regards,\nWorkBee Team"
            )
            sms_message = "Your WorkBee worker account has been suspended."
        send_notification(user, email_subject, email_message, sms_message)

        return Response(ManagementUserSerializer(user).data)

    @swagger_auto_schema(request_body=openapi.Schema(type=openapi.TYPE_OBJECT), responses={200: ManagementUserSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return self._set_worker_status(request, 'approved')

    @swagger_auto_schema(request_body=openapi.Schema(type=openapi.TYPE_OBJECT), responses={200: ManagementUserSerializer})
    @action(detail=True, methods=['post'])
    def suspend(self, request, pk=None):
        return self._set_worker_status(request, 'suspended')


class ManagementJobViewSet(LimitedListMixin, viewsets.ReadOnlyModelViewSet):
    """
    Admin API for viewing jobs, newest first.
    Only accessible to admin/superuser accounts.
    """
    queryset = Job.objects.select_related('customer', 'selected_worker').order_by('-created_at', '-id')
    serializer_class = ManagementJobSerializer
    permission_classes = [IsAuthenticated, IsAdmin]


class ManagementPaymentViewSet(LimitedListMixin, viewsets.ReadOnlyModelViewSet):
    """
    Admin API for viewing payments, most recently paid first.
    Only accessible to admin/superuser accounts.
    """
    queryset = Payment.objects.select_related('job', 'customer').order_by(
        F('paid_at').desc(nulls_last=True), '-created_at'
    )
    serializer_class = ManagementPaymentSerializer
    permission_classes = [IsAuthenticated, IsAdmin]


class ManagementLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin API for viewing the audit trail of management actions.
    Only accessible to admin/superuser accounts.
    """
    queryset = ManagementLog.objects.select_related('admin').all()
    serializer_class = ManagementLogSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
