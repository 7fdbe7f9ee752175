"""
Email Service using Resend

Sends verification codes for sign-up and for the account-bound
re-verification flow. Delivery is best-effort: failures are logged and
reported as ``False`` but never raised to the caller.
"""

import asyncio
import logging
from html import escape

import resend

from smartlearn.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent (or logged in place of sending)
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": settings.email_from,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Resend's client is synchronous
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


async def send_verification_email(to_email: str, username: str, code: str) -> bool:
    """Send a 6-digit email verification code."""
    safe_username = escape(username)
    ttl_hours = settings.verification_code_ttl_hours

    if not resend.api_key and settings.is_development:
        logger.info(f"DEV verification code for {to_email}: {code}")

    html_content = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1e3a8a; margin-bottom: 24px; }}
            .code {{ font-size: 32px; font-weight: 700; letter-spacing: 8px; color: #1e3a8a; margin: 24px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">Verify Your Email</h1>

            <p>Hello {safe_username},</p>

            <p>Use the code below to verify your email address on SmartLearn:</p>

            <p class="code">{code}</p>

            <p><strong>This code expires in {ttl_hours} hours.</strong></p>

            <div class="footer">
                <p>If you didn't request this code, you can safely ignore this email.</p>
                <p>SmartLearn</p>
            </div>
        </div>
    </body>
    </html>
    """
    return await send_email(
        to_email=to_email,
        subject="Your SmartLearn verification code",
        html_content=html_content,
    )
