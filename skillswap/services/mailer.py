"""Email delivery over SMTP with a logged simulation fallback."""

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from skillswap.config import settings

logger = logging.getLogger(__name__)

HTML_TEMPLATE_BASE = """
<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: 'Inter', -apple-system, sans-serif; background-color: #f8f9fa; color: #333; margin: 0; padding: 0; }
        .container { max-width: 600px; margin: 40px auto; background: #ffffff; border-radius: 12px; overflow: hidden; }
        .header { background: #7c3aed; padding: 30px 40px; text-align: center; }
        .header h1 { color: #ffffff; margin: 0; font-size: 24px; }
        .content { padding: 40px; line-height: 1.6; }
        .footer { background: #f1f3f5; padding: 20px; text-align: center; color: #6c757d; font-size: 13px; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header"><h1>SkillSwap</h1></div>
        <div class="content">{body}</div>
        <div class="footer">
            <p>You received this email because notifications are enabled on your SkillSwap account.</p>
        </div>
    </div>
</body>
</html>
"""


def render_email(content: str) -> str:
    body = f"<p>{escape(content)}</p><p>Log into SkillSwap to respond.</p>"
    return HTML_TEMPLATE_BASE.replace("{body}", body)


def _send_email_sync(recipient_email: str, subject: str, html_body: str) -> bool:
    """Send the email, or log a simulated delivery when SMTP is not configured."""
    if not settings.SMTP_USERNAME or not settings.SMTP_PASSWORD:
        logger.info("Simulated email to %s: %s", recipient_email, subject)
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = f"SkillSwap <{settings.SMTP_USERNAME}>"
    msg["To"] = recipient_email
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT) as server:
            server.starttls()
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        # Email is a best-effort copy of the in-app notification.
        logger.error("Failed to send email to %s: %s", recipient_email, e)
        return False

    logger.info("Email sent to %s", recipient_email)
    return True


async def send_notification_email(recipient_email: str, subject: str, content: str) -> bool:
    """Run the blocking SMTP exchange in a worker thread."""
    html = render_email(content)
    return await asyncio.to_thread(_send_email_sync, recipient_email, subject, html)
