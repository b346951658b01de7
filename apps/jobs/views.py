from decimal import Decimal
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, generics
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from .models import Job
from .serializers import JobSerializer, JobListSerializer
from .utils import send_notification, dashboard_summary
from apps.users.serializers import UserSerializer
from core.constants import JOB_STATUS_CHOICES, DASHBOARD_OPEN_JOBS_LIMIT
from core.utils import IsCustomer, IsWorker
import logging

logger = logging.getLogger(__name__)


def as_money(value):
    return str(Decimal(value).quantize(Decimal('0.01')))


class JobCreateView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Post a new job request.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['title', 'description'],
            properties={
                'title': openapi.Schema(type=openapi.TYPE_STRING),
                'description': openapi.Schema(type=openapi.TYPE_STRING),
            },
        ),
        responses={
            201: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: 'Forbidden'
        }
    )
    def post(self, request):
        serializer = JobSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            job = serializer.save()
            logger.info(f"Customer {request.user.id} posted job {job.id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class JobListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List all jobs, newest first.",
        manual_parameters=[
            openapi.Parameter(
                'status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                enum=[choice for choice, _ in JOB_STATUS_CHOICES]
            )
        ],
        responses={200: JobListSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        jobs = Job.objects.select_related('selected_worker')
        job_status = request.query_params.get('status')
        if job_status:
            jobs = jobs.filter(status=job_status)
        serializer = JobListSerializer(jobs, many=True)
        return Response(serializer.data)


class JobDetailView(generics.RetrieveAPIView):
    queryset = Job.objects.select_related('customer', 'selected_worker')
    serializer_class = JobSerializer
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve details of a specific job.",
        responses={200: JobSerializer, 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class CustomerDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Customer workspace: own jobs and spending summary.",
        responses={200: 'Dashboard', 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        jobs = list(Job.objects.filter(customer=request.user).select_related('selected_worker'))
        summary = dashboard_summary(jobs, 'total_price')
        return Response({
            'profile': UserSerializer(request.user).data,
            'jobs': JobListSerializer(jobs, many=True).data,
            'active_jobs': summary['active_jobs'],
            'open_jobs': summary['open_jobs'],
            'completed_jobs': summary['completed_jobs'],
            'total_spent': as_money(summary['total']),
        })


class WorkerDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Worker workspace: assigned jobs, newest open jobs and earnings.",
        responses={200: 'Dashboard', 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        my_jobs = list(Job.objects.filter(selected_worker=request.user).select_related('selected_worker'))
        open_jobs = Job.objects.filter(status='open').select_related('selected_worker')[:DASHBOARD_OPEN_JOBS_LIMIT]
        summary = dashboard_summary(my_jobs, 'worker_payout')
        success_rate = round(summary['completed_jobs'] / len(my_jobs) * 100) if my_jobs else 0
        return Response({
            'profile': UserSerializer(request.user).data,
            'jobs': JobListSerializer(my_jobs, many=True).data,
            'open_jobs': JobListSerializer(open_jobs, many=True).data,
            'active_jobs': summary['active_jobs'],
            'completed_jobs': summary['completed_jobs'],
            'total_earnings': as_money(summary['total']),
            'success_rate': success_rate,
        })


class JobCompleteView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Customer confirms the work is done, releasing the escrowed payment to the worker.",
        responses={
            200: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            404: 'Not Found'
        }
    )
    def post(self, request, pk):
        try:
            job = Job.objects.get(pk=pk, customer=request.user)
        except Job.DoesNotExist:
            return Response({"error": "Job not found or not authorized"}, status=status.HTTP_404_NOT_FOUND)

        if not job.can_be_completed():
            return Response(
                {"error": "Only a job in progress with payment secured in escrow can be completed"},
                status=status.HTTP_400_BAD_REQUEST
            )

        job.mark_completed()
        logger.info(f"Job {job.id} completed, escrow released to worker {job.selected_worker_id}")

        # Notify worker
        worker = job.selected_worker
        email_subject = f"Job Completed: {job.title}"
        email_message = (
            f"Dear {worker.name},\n\n"
            f"{request.user.name} has confirmed that the job '{job.title}' is complete.\n"
            f"Your payout of {job.worker_payout} has been released from escrow.\n\n"
            f"Best regards,\nWorkBee Team"
        )
        sms_message = f"Job '{job.title}' confirmed complete. Payout of {job.worker_payout} released."
        send_notification(worker, email_subject, email_message, sms_message)

        return Response(JobSerializer(job).data)
