"""
Email service using fastapi-mail over SMTP.

Delivery is best-effort: every sender here is scheduled through FastAPI
BackgroundTasks after the response is built, and a failed send is logged but
never surfaces to the caller. Set MAIL_SUPPRESS_SEND=true to build messages
without opening an SMTP connection (tests, local development).

fastapi-mail port notes:
  - MAIL_STARTTLS=True, MAIL_SSL_TLS=False for port 587
  - MAIL_SSL_TLS=True, MAIL_STARTTLS=False for port 465
"""
import html
import logging
from typing import Optional

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from app.config import settings
from app.models.enums import OTPPurpose

logger = logging.getLogger(__name__)

mail_config = ConnectionConfig(
    MAIL_USERNAME=settings.mail_username,
    MAIL_PASSWORD=settings.mail_password,
    MAIL_FROM=settings.mail_from,
    MAIL_PORT=settings.mail_port,
    MAIL_SERVER=settings.mail_server,
    MAIL_STARTTLS=settings.mail_port != 465,
    MAIL_SSL_TLS=settings.mail_port == 465,
    USE_CREDENTIALS=True,
    VALIDATE_CERTS=True,
    SUPPRESS_SEND=1 if settings.mail_suppress_send else 0,
)

fast_mail = FastMail(mail_config)

PRIMARY_COLOR = "#FF385C"


def name_from_email(email: str) -> str:
    """'jane.doe@x.com' → 'Jane Doe'; used as the greeting when no name is set."""
    local_part = email.split("@")[0]
    for separator in "._-":
        local_part = local_part.replace(separator, " ")
    return " ".join(part.capitalize() for part in local_part.split())


def render_email(title: str, content: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>{title}</title></head>
<body style="margin:0;padding:20px 0;font-family:Arial,sans-serif;background-color:#f5f5f5;">
  <table role="presentation" style="width:600px;max-width:100%;margin:0 auto;background:#ffffff;border-radius:8px;">
    <tr><td style="background-color:{PRIMARY_COLOR};padding:24px;text-align:center;color:#ffffff;font-size:22px;border-radius:8px 8px 0 0;">
      {settings.app_name}
    </td></tr>
    <tr><td style="padding:32px 28px;">{content}</td></tr>
    <tr><td style="padding:16px 28px;background:#f9f9f9;color:#666666;font-size:12px;text-align:center;border-radius:0 0 8px 8px;">
      If you have any questions, please contact our support team.
    </td></tr>
  </table>
</body>
</html>"""


def render_otp_email(otp: str, purpose: OTPPurpose, user_name: Optional[str] = None) -> tuple[str, str]:
    """Returns (subject, html body) for an OTP message."""
    if purpose == OTPPurpose.SIGNUP:
        subject, action = "Verify your account - OTP Code", "verify your account"
    else:
        subject, action = "Sign in to your account - OTP Code", "sign in to your account"
    greeting = f"Hello {html.escape(user_name)}," if user_name else "Hello,"

    content = f"""
      <h1 style="color:#333333;font-size:22px;">{subject}</h1>
      <p style="color:#666666;">{greeting}</p>
      <p style="color:#666666;">Please use the following code to {action}:</p>
      <div style="border:2px dashed {PRIMARY_COLOR};border-radius:8px;padding:20px;text-align:center;
                  color:{PRIMARY_COLOR};font-size:32px;font-weight:700;letter-spacing:8px;">{otp}</div>
      <p style="color:#666666;">This code will expire in <strong>{settings.otp_expiry_minutes} minutes</strong>.</p>
      <p style="color:#999999;">If you didn't request this code, please ignore this email.</p>
    """
    return subject, render_email(subject, content)


def render_kyc_email(status: str, notes: Optional[str] = None) -> tuple[str, str]:
    approved = status == "approved"
    subject = "KYC Verification Approved" if approved else "KYC Verification Rejected"
    content = f"""
      <h1 style="color:#333333;font-size:22px;">{subject}</h1>
      <p style="color:#666666;">Your KYC verification has been {status}.</p>
      {f'<p style="color:#666666;">Notes: {html.escape(notes)}</p>' if notes else ''}
      {'' if approved else '<p style="color:#666666;">Please submit a new KYC application.</p>'}
    """
    return subject, render_email(subject, content)


async def _send(email_to: str, subject: str, body: str) -> None:
    message = MessageSchema(
        subject=subject,
        recipients=[email_to],
        body=body,
        subtype=MessageType.html,
    )
    try:
        await fast_mail.send_message(message)
    except Exception:
        logger.exception("Failed to send '%s' email to %s", subject, email_to)


async def send_otp_email(email_to: str, otp: str, purpose: OTPPurpose, user_name: Optional[str] = None) -> None:
    subject, body = render_otp_email(otp, purpose, user_name or name_from_email(email_to))
    await _send(email_to, subject, body)


async def send_kyc_email(email_to: str, status: str, notes: Optional[str] = None) -> None:
    """status: "approved" | "rejected" """
    subject, body = render_kyc_email(status, notes)
    await _send(email_to, subject, body)
