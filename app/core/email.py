# app/core/email.py
"""
Email service using Resend for sending transactional emails.

Every sender returns ``{"success": bool, ...}`` and never raises; callers run
them as background tasks after the response has been built.
"""
import logging

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: #1C8443; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .content { background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }
    .code-box { background: white; border: 2px dashed #41AD49; padding: 20px; text-align: center; margin: 20px 0; border-radius: 8px; }
    .code { font-size: 26px; font-weight: bold; color: #1C8443; letter-spacing: 3px; }
    .details { background: white; padding: 15px; border-radius: 8px; margin: 15px 0; }
    .footer { text-align: center; color: #888; font-size: 12px; margin-top: 20px; }
"""


def init_resend() -> bool:
    """Initialize Resend with API key. Returns False when no key is configured."""
    if not settings.RESEND_API_KEY:
        return False
    resend.api_key = settings.RESEND_API_KEY
    return True


def _render(title: str, body_html: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <style>{_STYLE}</style>
    </head>
    <body>
        <div class="container">
            <div class="header">
                <h1>{title}</h1>
            </div>
            <div class="content">
                {body_html}
                <p>Best regards,<br>The Academic Events Team</p>
            </div>
            <div class="footer">
                <p>This email was sent by the Academic Events platform</p>
            </div>
        </div>
    </body>
    </html>
    """


def _send(to_email: str, subject: str, html_content: str) -> dict:
    if not init_resend():
        logger.info(f"RESEND_API_KEY not set; skipping email '{subject}' to {to_email}")
        return {"success": False, "error": "email disabled"}

    params = {
        "from": f"Academic Events <noreply@{settings.RESEND_FROM_DOMAIN}>",
        "to": [to_email],
        "subject": subject,
        "html": html_content,
    }

    try:
        response = resend.Emails.send(params)
        logger.info(f"Email '{subject}' sent to {to_email}")
        return {"success": True, "id": response.get("id")}
    except Exception as e:
        logger.error(
            f"Failed to send email to {to_email}: {e}",
            exc_info=True,
            extra={"to_email": to_email, "subject": subject},
        )
        return {"success": False, "error": str(e)}


def send_registration_confirmation(
    to_email: str,
    recipient_name: str,
    event_name: str,
    event_date: str,
    qr_code: str,
    event_location: str = None,
    session_titles: list[str] | None = None,
) -> dict:
    """
    Send a registration confirmation email.

    Args:
        to_email: Recipient email address
        recipient_name: Name of the recipient
        event_name: Title of the event
        event_date: Formatted start date/time of the event
        qr_code: Attendance token presented at check-in
        event_location: Optional venue/location info
        session_titles: Sessions the participant signed up for
    """
    location_html = f"<p><strong>Location:</strong> {event_location}</p>" if event_location else ""
    sessions_html = ""
    if session_titles:
        items = "".join(f"<li>{title}</li>" for title in session_titles)
        sessions_html = f"<p><strong>Sessions:</strong></p><ul>{items}</ul>"

    body = f"""
        <p>Hi {recipient_name},</p>
        <p>Your registration for <strong>{event_name}</strong> has been confirmed.</p>
        <div class="code-box">
            <p style="margin: 0 0 10px 0; color: #666;">Your attendance code</p>
            <div class="code">{qr_code}</div>
            <p style="margin: 10px 0 0 0; font-size: 12px; color: #888;">Present this code at check-in</p>
        </div>
        <div class="details">
            <h3 style="margin-top: 0;">Event Details</h3>
            <p><strong>Event:</strong> {event_name}</p>
            <p><strong>Date:</strong> {event_date}</p>
            {location_html}
            {sessions_html}
        </div>
    """
    return _send(to_email, f"Registration Confirmed: {event_name}", _render("You're Registered!", body))


def send_certificate_pending(
    to_email: str,
    recipient_name: str,
    event_name: str,
    certificate_number: str,
) -> dict:
    """Tell a participant their attendance certificate is being prepared."""
    body = f"""
        <p>Hi {recipient_name},</p>
        <p>Thank you for attending <strong>{event_name}</strong>.</p>
        <p>Your certificate of participation is being prepared and will be
        available from your profile once it is issued.</p>
        <div class="code-box">
            <p style="margin: 0 0 10px 0; color: #666;">Certificate number</p>
            <div class="code">{certificate_number}</div>
        </div>
    """
    return _send(to_email, f"Certificate in preparation: {event_name}", _render("Thanks for attending", body))
