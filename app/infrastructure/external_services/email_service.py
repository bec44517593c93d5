"""Email service for account and billing notifications"""

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ...core.config import Settings
from ...domain.value_objects.money import Money

logger = logging.getLogger(__name__)


class EmailService:
    """Builds notification emails and hands them to the email worker.

    ``send_email`` performs the SMTP delivery and is called from the Celery
    task. Everything else only enqueues: a failure to queue or deliver is
    logged and never reaches the caller.
    """

    def __init__(self, config: Settings):
        self.smtp_host = config.SMTP_HOST
        self.smtp_port = config.SMTP_PORT
        self.smtp_username = config.SMTP_USERNAME
        self.smtp_password = config.SMTP_PASSWORD
        self.smtp_use_tls = config.SMTP_USE_TLS
        self.from_email = config.FROM_EMAIL
        self.from_name = config.FROM_NAME
        self.frontend_url = config.FRONTEND_URL.rstrip("/")
        self.api_prefix = config.API_PREFIX
        self.verification_hours = config.VERIFICATION_TOKEN_EXPIRE_HOURS
        self.reset_hours = config.PASSWORD_RESET_TOKEN_EXPIRE_HOURS

    def send_email(self, to_email: str, subject: str, html_content: str,
                   text_content: Optional[str] = None) -> bool:
        """Deliver one message over SMTP. Returns False if delivery failed."""
        if not self.smtp_host:
            logger.info(f"SMTP not configured, skipping email to {to_email}: {subject}")
            return True

        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = f"{self.from_name} <{self.from_email}>"
        msg['To'] = to_email
        if text_content:
            msg.attach(MIMEText(text_content, 'plain'))
        msg.attach(MIMEText(html_content, 'html'))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password or "")
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception(f"Error sending email to {to_email}")
            return False

        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    def queue_email(self, to_email: str, subject: str, html_content: str,
                    text_content: Optional[str] = None) -> None:
        """Fire-and-forget delivery through the email worker"""
        from ...tasks import send_email_task

        try:
            send_email_task.delay(to_email, subject, html_content, text_content)
        except Exception:
            logger.exception(f"Failed to queue email to {to_email}: {subject}")

    def _layout(self, title: str, body: str) -> str:
        return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>
                body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
                .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
                .header {{ background: #4f46e5; color: white; padding: 24px; text-align: center; border-radius: 8px 8px 0 0; }}
                .content {{ background: #f9f9f9; padding: 24px; border-radius: 0 0 8px 8px; }}
                .button {{ display: inline-block; background: #4f46e5; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px; margin: 20px 0; }}
                .footer {{ text-align: center; margin-top: 30px; color: #666; font-size: 14px; }}
            </style>
        </head>
        <body>
            <div class="container">
                <div class="header"><h1>{title}</h1></div>
                <div class="content">{body}</div>
                <div class="footer"><p>{self.from_name}</p></div>
            </div>
        </body>
        </html>
        """

    def verification_url(self, token: str) -> str:
        return f"{self.frontend_url}{self.api_prefix}/auth/verify?token={token}"

    def reset_url(self, token: str) -> str:
        return f"{self.frontend_url}/reset-password?token={token}"

    def send_verification_email(self, to_email: str, verification_token: str) -> None:
        url = self.verification_url(verification_token)
        body = f"""
            <p>Thanks for signing up! Please verify your email address to activate your account.</p>
            <a href="{url}" class="button">Verify Email Address</a>
            <p>Or copy and paste this link into your browser:</p>
            <p><a href="{url}">{url}</a></p>
            <p>This link will expire in {self.verification_hours} hours.</p>
        """
        text = (
            f"Please verify your email address by opening this link:\n{url}\n\n"
            f"This link will expire in {self.verification_hours} hours."
        )
        self.queue_email(to_email, "Verify your email address", self._layout("Verify Your Email", body), text)

    def send_password_reset_email(self, to_email: str, reset_token: str) -> None:
        url = self.reset_url(reset_token)
        body = f"""
            <p>We received a request to reset your password.</p>
            <a href="{url}" class="button">Reset Password</a>
            <p>This link will expire in {self.reset_hours} hour(s). If you didn't request a reset, you can ignore this email.</p>
        """
        text = (
            f"Reset your password by opening this link:\n{url}\n\n"
            f"This link will expire in {self.reset_hours} hour(s)."
        )
        self.queue_email(to_email, "Reset your password", self._layout("Password Reset", body), text)

    def send_subscription_activated_email(self, to_email: str, name: str, plan_name: str,
                                          next_billing: Optional[datetime]) -> None:
        billing = next_billing.strftime("%Y-%m-%d") if next_billing else "n/a"
        body = f"""
            <p>Hi {name},</p>
            <p>Your subscription has been activated successfully.</p>
            <p>Plan: <strong>{plan_name}</strong></p>
            <p>Next billing date: {billing}</p>
            <p>Thank you for subscribing!</p>
        """
        self.queue_email(to_email, "Subscription Activated", self._layout(f"Welcome to {plan_name}!", body))

    def send_payment_receipt_email(self, to_email: str, name: str, amount: Money,
                                   paid_at: datetime, invoice_url: Optional[str] = None) -> None:
        link = f'<p><a href="{invoice_url}">View Invoice</a></p>' if invoice_url else ""
        body = f"""
            <p>Hi {name},</p>
            <p>Thank you for your payment!</p>
            <p>Amount: ${amount.amount:.2f} {amount.currency}</p>
            <p>Date: {paid_at.strftime("%Y-%m-%d")}</p>
            {link}
        """
        self.queue_email(to_email, "Payment Receipt", self._layout("Payment Received", body))

    def send_payment_failed_email(self, to_email: str, name: str, amount: Money) -> None:
        url = f"{self.frontend_url}/subscription"
        body = f"""
            <p>Hi {name},</p>
            <p>We were unable to process your payment.</p>
            <p>Amount: ${amount.amount:.2f} {amount.currency}</p>
            <p>Please update your payment method to avoid service interruption.</p>
            <a href="{url}" class="button">Update Payment Method</a>
        """
        self.queue_email(to_email, "Payment Failed", self._layout("Payment Failed", body))

    def send_subscription_canceled_email(self, to_email: str, name: str, plan_name: str,
                                         immediate: bool, period_end: Optional[datetime] = None) -> None:
        if immediate or not period_end:
            detail = "Your subscription has been canceled and access to paid features has ended."
        else:
            detail = f"You will keep access until {period_end.strftime('%Y-%m-%d')}."
        body = f"""
            <p>Hi {name},</p>
            <p>Your <strong>{plan_name}</strong> subscription has been canceled.</p>
            <p>{detail}</p>
        """
        self.queue_email(to_email, "Subscription Canceled", self._layout("Subscription Canceled", body))

    def send_plan_changed_email(self, to_email: str, name: str, plan_name: str) -> None:
        body = f"""
            <p>Hi {name},</p>
            <p>Your subscription now uses the <strong>{plan_name}</strong> plan.</p>
            <p>Any price difference is prorated on your next invoice.</p>
        """
        self.queue_email(to_email, "Subscription Updated", self._layout("Plan Changed", body))
