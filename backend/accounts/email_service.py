# accounts/email_service.py
"""
Email service for LifeHub workspace sharing.

Handles:
- Workspace invitation emails

All emails are sent from DEFAULT_FROM_EMAIL through Django's mail backend.
"""

import logging
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags
from django.conf import settings

logger = logging.getLogger(__name__)


def send_invitation_email(invitation) -> bool:
    """
    Send a workspace invitation to the invited address.

    Args:
        invitation: WorkspaceInvitation instance

    Returns:
        True if email was sent successfully, False otherwise
    """
    inviter = invitation.invited_by
    accept_url = f"{settings.FRONTEND_URL}/invitations/{invitation.pk}"

    context = {
        "inviter_name": inviter.display_name,
        "workspace_name": invitation.workspace.name,
        "role": invitation.get_role_display(),
        "accept_url": accept_url,
        "expires_at": invitation.expires_at,
    }

    try:
        html_message = render_to_string("emails/workspace_invitation.html", context)
        plain_message = strip_tags(html_message)

        send_mail(
            subject=f"{inviter.display_name} invited you to {invitation.workspace.name}",
            message=plain_message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[invitation.email],
            html_message=html_message,
            fail_silently=False,
        )
        logger.info(f"Invitation email sent to {invitation.email}")
        return True
    except Exception as e:
        logger.error(f"Failed to send invitation email to {invitation.email}: {e}")
        return False
