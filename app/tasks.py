import logging
from typing import Optional

from .celery_app import celery_app
from .core.config import get_settings
from .infrastructure.external_services.email_service import EmailService

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_email_task(self, to_email: str, subject: str, html_content: str,
                    text_content: Optional[str] = None):
    """Background task to deliver one email."""
    email_service = EmailService(get_settings())
    if email_service.send_email(to_email, subject, html_content, text_content):
        return True

    if self.request.retries >= self.max_retries:
        logger.error(f"Giving up on email to {to_email}: {subject}")
        return False
    raise self.retry(countdown=60 * (self.request.retries + 1))
