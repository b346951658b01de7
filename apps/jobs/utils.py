import logging
import re
from django.conf import settings
from django.core.mail import send_mail
from twilio.rest import Client as TwilioClient
from twilio.base.exceptions import TwilioRestException

logger = logging.getLogger(__name__)

PHONE_NUMBER_FORMAT = re.compile(r'^\+\d{9,15}$')


def send_notification(user, subject, email_message, sms_message):
    """
    Send notifications to users via email and SMS.

    Delivery problems are logged; they never propagate to the caller.

    Args:
        user: User object to send notification to
        subject: Email subject
        email_message: Email message content
        sms_message: SMS message content
    """
    if user.email:
        try:
            send_mail(
                subject=subject,
                message=email_message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False,
            )
            logger.info(f"Email notification sent to {user.email}")
        except Exception as e:
            logger.error(f"Failed to send email to {user.email}: {str(e)}")

    if not user.phone_number or not settings.TWILIO_ACCOUNT_SID:
        return
    if not PHONE_NUMBER_FORMAT.match(user.phone_number):
        logger.warning(f"Invalid phone number format for user {user.id}: {user.phone_number}")
        return
    try:
        twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        twilio_client.messages.create(
            body=sms_message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=user.phone_number
        )
        logger.info(f"SMS notification sent to {user.phone_number}")
    except TwilioRestException as e:
        logger.error(f"Failed to send SMS to {user.phone_number}: {str(e)}")


def dashboard_summary(jobs, amount_field):
    """Counts by status and the summed amount over completed jobs, as shown on the dashboards."""
    active = [job for job in jobs if job.status == 'in_progress']
    open_jobs = [job for job in jobs if job.status == 'open']
    completed = [job for job in jobs if job.status == 'completed']
    total = sum((getattr(job, amount_field) or 0 for job in completed), 0)
    return {
        'active_jobs': len(active),
        'open_jobs': len(open_jobs),
        'completed_jobs': len(completed),
        'total': total,
    }
