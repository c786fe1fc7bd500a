import logging
import os
from celery import shared_task
from flask import current_app, has_app_context
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException

logger = logging.getLogger(__name__)


def _sms_enabled() -> bool:
    return os.environ.get("SMS_ENABLED", "0").lower() in ("1", "true", "yes")


@shared_task(ignore_result=True)
def send_sms_task(to: str, body: str) -> None:
    """Deliver ``body`` to ``to`` through Twilio, or log it when SMS is disabled."""
    if not _sms_enabled():
        logger.info("[SMS disabled] message queued for %s", to[-4:])
        return
    client = Client(os.environ["TWILIO_ACCOUNT_SID"], os.environ["TWILIO_AUTH_TOKEN"])
    try:
        message = client.messages.create(
            from_=os.environ["TWILIO_SMS_FROM"],
            to=to,
            body=body,
        )
    except TwilioRestException as e:
        logger.error("Failed to send SMS: %s", e, exc_info=True)
        raise
    logger.info("[SMS] message sent. SID: %s", message.sid)


def dispatch_sms(to: str, body: str) -> None:
    """Run the SMS task inline under test, through the broker otherwise."""
    if has_app_context() and current_app.config.get("TESTING"):
        send_sms_task(to, body)
    else:
        send_sms_task.delay(to, body)
