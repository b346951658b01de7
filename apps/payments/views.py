import json
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated, AllowAny
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.conf import settings
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from .models import Payment
from .serializers import PaymentSerializer, PaymentSummarySerializer
from .utils import (
    payment_breakdown, generate_reference, initialize_payment,
    verify_payment, is_valid_signature, settle_payment
)
from apps.jobs.models import Job
from core.exceptions import PaymentGatewayError
from core.utils import IsCustomer
import logging

logger = logging.getLogger(__name__)


def get_customer_job(request, job_id):
    return Job.objects.select_related('selected_worker').get(pk=job_id, customer=request.user)


class PaymentSummaryView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Amount due for a hired job: the agreed price plus the platform service fee.",
        responses={200: PaymentSummarySerializer, 401: 'Unauthorized', 404: 'Not Found'}
    )
    def get(self, request, job_id):
        try:
            job = get_customer_job(request, job_id)
        except Job.DoesNotExist:
            return Response({"error": "Job not found or not authorized"}, status=status.HTTP_404_NOT_FOUND)
        if not job.selected_worker_id:
            return Response({"error": "Hire a worker before paying for this job"}, status=status.HTTP_400_BAD_REQUEST)

        breakdown = payment_breakdown(job)
        serializer = PaymentSummarySerializer({
            'job_id': job.id,
            'job_title': job.title,
            'worker_name': job.selected_worker.name,
            'amount': breakdown['amount'],
            'service_fee': breakdown['service_fee'],
            'total': breakdown['total'],
            'currency': settings.PAYSTACK_CURRENCY,
            'escrow_status': job.escrow_status,
        })
        return Response(serializer.data)


class PaymentInitializeView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Start a Paystack checkout for a hired job and return the hosted payment page URL.",
        responses={
            200: 'Pending checkout for this job returned again',
            201: openapi.Response(
                description='Checkout started',
                schema=openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    properties={
                        'authorization_url': openapi.Schema(type=openapi.TYPE_STRING),
                        'reference': openapi.Schema(type=openapi.TYPE_STRING),
                    }
                )
            ),
            400: 'Bad Request',
            401: 'Unauthorized',
            404: 'Not Found',
            502: 'Payment provider error'
        }
    )
    def post(self, request, job_id):
        try:
            job = get_customer_job(request, job_id)
        except Job.DoesNotExist:
            return Response({"error": "Job not found or not authorized"}, status=status.HTTP_404_NOT_FOUND)
        if not job.can_be_paid():
            return Response(
                {"error": "Only a job in progress with a hired worker and no payment yet can be paid"},
                status=status.HTTP_400_BAD_REQUEST
            )

        # One open checkout per job; a second one could be paid on top of the first
        pending = job.payments.filter(status='pending').exclude(authorization_url='').first()
        if pending:
            return Response(
                {'authorization_url': pending.authorization_url, 'reference': pending.reference},
                status=status.HTTP_200_OK
            )

        breakdown = payment_breakdown(job)
        payment = Payment.objects.create(
            job=job,
            customer=request.user,
            amount=breakdown['amount'],
            service_fee=breakdown['service_fee'],
            total_amount=breakdown['total'],
            currency=settings.PAYSTACK_CURRENCY,
            reference=generate_reference(job, request.user),
        )
        try:
            data = initialize_payment(payment)
        except PaymentGatewayError as e:
            payment.mark_failed(e.response_data)
            return Response({"error": e.message}, status=status.HTTP_502_BAD_GATEWAY)

        payment.authorization_url = data['authorization_url']
        payment.save(update_fields=['authorization_url'])
        logger.info(f"Customer {request.user.id} started payment {payment.reference} for job {job.id}")
        return Response(
            {'authorization_url': payment.authorization_url, 'reference': payment.reference},
            status=status.HTTP_201_CREATED
        )


class PaymentCallbackView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Confirm a checkout after Paystack redirects back. The reference is verified with Paystack.",
        manual_parameters=[
            openapi.Parameter('reference', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True),
            openapi.Parameter('jobId', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: PaymentSerializer, 400: 'Payment failed', 404: 'Not Found', 502: 'Payment provider error'}
    )
    def get(self, request):
        reference = request.query_params.get('reference') or request.query_params.get('trxref')
        if not reference:
            return Response({"error": "No payment reference found"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            payment = Payment.objects.select_related('job', 'customer').get(reference=reference)
        except Payment.DoesNotExist:
            logger.error(f"Payment not found for reference: {reference}")
            return Response({"error": "Payment not found"}, status=status.HTTP_404_NOT_FOUND)

        job_id = request.query_params.get('jobId')
        if job_id and str(payment.job_id) != job_id:
            logger.warning(f"Callback job mismatch for {reference}: got {job_id}, expected {payment.job_id}")
            return Response({"error": "Payment does not belong to this job"}, status=status.HTTP_400_BAD_REQUEST)

        if payment.status == 'paid':
            return Response(PaymentSerializer(payment).data)

        try:
            verification = verify_payment(reference)
        except PaymentGatewayError as e:
            return Response({"error": e.message}, status=status.HTTP_502_BAD_GATEWAY)

        paid = settle_payment(payment, verification)
        payment.refresh_from_db()
        if not paid:
            return Response(
                {"error": "Payment verification failed", "payment": PaymentSerializer(payment).data},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(PaymentSerializer(payment).data)


@method_decorator(csrf_exempt, name='dispatch')
class PaystackWebhookView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    @swagger_auto_schema(auto_schema=None)
    def post(self, request):
        raw_body = request.body
        signature = request.headers.get('x-paystack-signature')
        if not is_valid_signature(raw_body, signature):
            logger.error('Invalid Paystack webhook signature')
            return Response({'error': 'Invalid webhook signature'}, status=status.HTTP_401_UNAUTHORIZED)

        try:
            event = json.loads(raw_body)
        except ValueError:
            return Response({'error': 'Malformed payload'}, status=status.HTTP_400_BAD_REQUEST)

        logger.debug(f"Received Paystack webhook: {event.get('event')}")
        if event.get('event') != 'charge.success':
            return Response({'message': 'Event ignored'}, status=status.HTTP_200_OK)

        data = event.get('data') or {}
        reference = data.get('reference')
        try:
            payment = Payment.objects.get(reference=reference)
        except Payment.DoesNotExist:
            logger.error(f'Payment not found for webhook reference: {reference}')
            return Response({'error': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)

        if settle_payment(payment, data):
            return Response({'message': 'Payment verified'}, status=status.HTTP_200_OK)
        return Response({'error': 'Verification failed'}, status=status.HTTP_400_BAD_REQUEST)


class PaymentHistoryView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="The customer's payments, newest first.",
        responses={200: PaymentSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        payments = Payment.objects.filter(customer=request.user).select_related('job')
        return Response(PaymentSerializer(payments, many=True).data)
