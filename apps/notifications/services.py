"""Notification services for email and in-app messages."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import EmailMultiAlternatives, send_mail  # type: ignore
from django.template.loader import render_to_string  # type: ignore
from django.utils.html import escape, strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import HallBooking
    from apps.users.models import CustomUser

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    template_name: str | None,
    context: dict,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send one email; returns False instead of raising on failure.

    Args:
        recipient_email: Recipient address
        subject: Subject line
        template_name: Django template path (optional)
        context: Template context; ``message`` is used for plain-text mails
        html_message: Pre-rendered HTML body (optional)
    """
    try:
        if html_message:
            text_message = strip_tags(html_message)
        elif template_name:
            html_message = render_to_string(template_name, context)
            text_message = strip_tags(html_message)
        else:
            text_message = context.get("message", "")
            html_message = None

        send_mail(
            subject=subject,
            message=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


def _money(amount) -> str:
    return f"R {amount:,.2f}"


def hall_booking_confirmation_html(booking: "HallBooking") -> str:
    """Confirmation body: reference, event details and payment summary."""
    event_date = booking.event_date.strftime("%A, %d %B %Y") if booking.event_date else "-"
    start = booking.event_start_time.strftime("%H:%M") if booking.event_start_time else "-"
    end = booking.event_end_time.strftime("%H:%M") if booking.event_end_time else "-"
    hall = escape(settings.HALL_NAME)

    return f"""
    <html>
    <body>
        <h2>{hall} Booking Confirmation</h2>
        <p>Dear {escape(booking.applicant_full_name)},</p>
        <p>Thank you for booking {hall}! Your payment has been processed successfully
        and your booking is now confirmed.</p>

        <p><strong>Booking Reference: {escape(booking.booking_reference)}</strong></p>

        <h3>Event Details</h3>
        <ul>
            <li><strong>Event Type:</strong> {escape(booking.get_event_type_display())}</li>
            <li><strong>Event Date:</strong> {event_date}</li>
            <li><strong>Event Time:</strong> {start} - {end}</li>
            <li><strong>Number of Guests:</strong> {booking.total_guests}</li>
            <li><strong>Number of Vehicles:</strong> {booking.number_of_vehicles}</li>
        </ul>

        <h3>Payment Summary</h3>
        <ul>
            <li><strong>Hall Rental Fee:</strong> {_money(booking.rental_fee)}</li>
            <li><strong>Security Deposit:</strong> {_money(booking.deposit_amount)}</li>
            <li><strong>Total Paid:</strong> {_money(booking.total_amount)}</li>
        </ul>
        <p>The {_money(booking.deposit_amount)} deposit is refunded within 7 working days
        after your event, provided there are no damages.</p>

        <h3>Important Reminders</h3>
        <ul>
            <li>Functions must end by {settings.HALL_CURFEW}</li>
            <li>Maximum {settings.HALL_MAX_GUESTS} guests and {settings.HALL_MAX_VEHICLES} vehicles permitted</li>
            <li>Leave the hall clean and tidy for the deposit refund</li>
        </ul>

        <p>Questions? Contact {escape(settings.HALL_BOOKINGS_ADMIN_EMAIL)} quoting your booking reference.</p>
        <p>We look forward to hosting your event!</p>
    </body>
    </html>
    """


def send_hall_booking_confirmation_email(booking: "HallBooking") -> bool:
    """Confirmation to the applicant, with a copy to the hall admin."""
    subject = f"{settings.HALL_NAME} Booking Confirmed - {booking.booking_reference}"
    html_message = hall_booking_confirmation_html(booking)
    context = {"booking": booking}

    recipient = booking.applicant_email or booking.user.email
    sent = send_email_notification(
        recipient_email=recipient,
        subject=subject,
        template_name=None,
        context=context,
        html_message=html_message,
    )

    admin_email = getattr(settings, "HALL_BOOKINGS_ADMIN_EMAIL", "")
    if admin_email:
        send_email_notification(
            recipient_email=admin_email,
            subject=f"New hall booking {booking.booking_reference} ({booking.applicant_full_name})",
            template_name=None,
            context=context,
            html_message=html_message,
        )
    return sent


def send_hall_booking_pdf_form(sender_name: str, sender_email: str, upload) -> bool:
    """
    Forward a filled-in PDF booking form to the hall admin.

    The PDF goes out as an attachment; replies reach the applicant directly.
    Returns False instead of raising on failure.
    """
    size_kb = f"{upload.size / 1024:.2f} KB"
    file_name = upload.name or "hall-booking-form.pdf"
    text_message = (
        f"{settings.HALL_NAME} PDF booking form submission\n\n"
        f"Submitted by: {sender_name}\n"
        f"Email: {sender_email}\n"
        f"File name: {file_name}\n"
        f"File size: {size_kb}\n\n"
        f"The completed booking form is attached. Please review it, check hall "
        f"availability and reply to {sender_email} within 24 hours."
    )
    html_message = f"""
    <html>
    <body>
        <h2>{escape(settings.HALL_NAME)} PDF Booking Form</h2>
        <p><strong>An applicant has submitted a completed booking form.</strong></p>
        <ul>
            <li><strong>Submitted by:</strong> {escape(sender_name)}</li>
            <li><strong>Email:</strong> {escape(sender_email)}</li>
            <li><strong>File name:</strong> {escape(file_name)}</li>
            <li><strong>File size:</strong> {size_kb}</li>
        </ul>
        <p>The form is attached. Please review it and reply to
        <a href="mailto:{escape(sender_email)}">{escape(sender_email)}</a> within 24 hours.</p>
    </body>
    </html>
    """

    try:
        upload.seek(0)
        message = EmailMultiAlternatives(
            subject=f"{settings.HALL_NAME} PDF Form - {sender_name}",
            body=text_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=[settings.HALL_BOOKINGS_ADMIN_EMAIL],
            reply_to=[sender_email],
        )
        message.attach_alternative(html_message, "text/html")
        message.attach(file_name, upload.read(), "application/pdf")
        message.send(fail_silently=False)
    except Exception as e:
        logger.error(f"Failed to forward PDF booking form from {sender_email}: {e}", exc_info=True)
        return False

    logger.info(f"PDF booking form from {sender_email} sent to {settings.HALL_BOOKINGS_ADMIN_EMAIL}")
    return True


def send_hall_booking_rejected_email(booking: "HallBooking") -> bool:
    subject = f"{settings.HALL_NAME} booking application declined"
    reason = booking.rejection_reason or "No reason was given."
    message = (
        f"Dear {booking.applicant_full_name or booking.user.email},\n\n"
        f"Unfortunately your application to book {settings.HALL_NAME}"
        f"{' on ' + booking.event_date.strftime('%d %B %Y') if booking.event_date else ''} "
        f"was declined.\n\nReason: {reason}\n\n"
        f"Please contact {settings.HALL_BOOKINGS_ADMIN_EMAIL} if you have any questions."
    )
    return send_email_notification(
        recipient_email=booking.applicant_email or booking.user.email,
        subject=subject,
        template_name=None,
        context={"message": message},
    )


# ============================================================================
# IN-APP NOTIFICATIONS
# ============================================================================

def create_in_app_notification(user: "CustomUser", title: str, message: str) -> bool:
    """Store an in-app notification; returns False instead of raising."""
    try:
        from .models import Notification

        Notification.objects.create(
            user=user,
            title=title,
            message=message,
        )

        logger.info(f"In-app notification created for {user.email}: {title}")
        return True

    except Exception as e:
        logger.error(f"Failed to create in-app notification for {user.email}: {e}", exc_info=True)
        return False
