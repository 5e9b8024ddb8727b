# invoicing/email_service.py
"""
Lesson notification emails.

Handles:
- Cancellation notice to the student
- Reassignment notice to the new teacher

Sending failures are logged and never undo the lesson change.
"""

import logging
from django.core.mail import send_mail
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


def _send(subject: str, message: str, recipient: str) -> bool:
    try:
        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
            fail_silently=False,
        )
        logger.info(f"Lesson email sent to {recipient}")
        return True
    except Exception as e:
        logger.error(f"Failed to send lesson email to {recipient}: {e}")
        return False


def send_cancellation_email(lesson) -> bool:
    """Tell the lesson's student that the lesson was cancelled."""
    student = lesson.student
    if student is None or not student.email:
        return False

    start = timezone.localtime(lesson.start)
    lines = [
        f"Hello {student.first_name},",
        "",
        f"your lesson \"{lesson.title}\" on {start:%d.%m.%Y} at {start:%H:%M} "
        f"has been marked as {lesson.get_status_display().lower()}.",
    ]
    if lesson.cancellation_reason:
        lines += ["", f"Reason: {lesson.cancellation_reason}"]
    return _send(f"Lesson cancelled: {lesson.title}", "\n".join(lines), student.email)


def send_reassignment_email(lesson) -> bool:
    """Tell the new teacher that a lesson was assigned to them."""
    teacher = lesson.teacher
    if teacher is None or not teacher.email:
        return False

    start = timezone.localtime(lesson.start)
    message = (
        f"Hello {teacher.display_name},\n\n"
        f"the lesson \"{lesson.title}\" for {lesson.customer.name} on "
        f"{start:%d.%m.%Y} at {start:%H:%M} is now assigned to you."
    )
    return _send(f"New lesson assigned: {lesson.title}", message, teacher.email)
