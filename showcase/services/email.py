import enum
import logging
import smtplib
import ssl
from contextlib import contextmanager
from email.message import EmailMessage as MIMEMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Callable, Optional

from pydantic import BaseModel

from showcase.db.models import Contact, EmailConfig
from showcase.services.email_templates import (
    html_to_text,
    render_confirmation,
    render_notification,
    render_test_email,
)

logger = logging.getLogger(__name__)


"""
EMAIL DISPATCHER => SMTP VERIFICATION & SENDING

One dispatcher is built per request from the stored email config.
Every call opens its own SMTP session and closes it before returning.
Failures are returned with a readable cause and never retried here.
"""


class DeliveryResult(BaseModel):
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


#Lifecycle of a verify-then-send operation
class DeliveryState(str, enum.Enum):
    IDLE = "idle"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    SENDING = "sending"
    SENT = "sent"
    SEND_FAILED = "send_failed"
    VERIFY_FAILED = "verify_failed"


TERMINAL_STATES = {
    DeliveryState.SENT,
    DeliveryState.SEND_FAILED,
    DeliveryState.VERIFY_FAILED,
}

_TRANSITIONS = {
    DeliveryState.IDLE: {DeliveryState.VERIFYING},
    DeliveryState.VERIFYING: {DeliveryState.VERIFIED, DeliveryState.VERIFY_FAILED},
    DeliveryState.VERIFIED: {DeliveryState.SENDING},
    DeliveryState.SENDING: {DeliveryState.SENT, DeliveryState.SEND_FAILED},
}


class DeliveryAttempt:
    def __init__(self):
        self.state = DeliveryState.IDLE
        self.history = [DeliveryState.IDLE]
        self.message_id: Optional[str] = None
        self.error: Optional[str] = None

    def advance(self, state: DeliveryState):
        if state not in _TRANSITIONS.get(self.state, set()):
            raise RuntimeError(
                f"Invalid delivery transition {self.state.value} -> {state.value}"
            )
        self.state = state
        self.history.append(state)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES


#Open a connected (not yet authenticated) SMTP session
def open_smtp(host: str, port: int, *, secure: bool, timeout: float):
    context = ssl.create_default_context()

    if secure:
        return smtplib.SMTP_SSL(host, port, timeout=timeout, context=context)

    server = smtplib.SMTP(host, port, timeout=timeout)
    try:
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=context)
            server.ehlo()
    except (smtplib.SMTPException, OSError):
        server.close()
        raise
    return server


class EmailDispatcher:

    def __init__(
        self,
        config: Optional[EmailConfig],
        *,
        smtp_factory: Callable = open_smtp,
        timeout: float = 10.0,
    ):
        self.config = config
        self.smtp_factory = smtp_factory
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.config and self.config.enabled)

    #A transport exists only for an enabled config with host, port and user
    @property
    def transport_available(self) -> bool:
        config = self.config
        return bool(
            self.enabled
            and config.smtp_host
            and config.smtp_port
            and config.smtp_user
        )

    @property
    def _address(self) -> str:
        return f"{self.config.smtp_host}:{self.config.smtp_port}"

    @contextmanager
    def _session(self):
        config = self.config
        server = self.smtp_factory(
            config.smtp_host,
            config.smtp_port,
            secure=config.smtp_secure,
            timeout=self.timeout,
        )
        try:
            if config.smtp_user:
                server.login(config.smtp_user, config.smtp_password or "")
            yield server
        finally:
            try:
                server.quit()
            except (smtplib.SMTPException, OSError):
                server.close()

    #Turn a transport exception into a cause an admin can act on
    def describe_error(self, exc: Exception) -> str:
        if isinstance(exc, smtplib.SMTPAuthenticationError):
            return f"SMTP authentication rejected by {self._address}: {_smtp_reply(exc)}"
        if isinstance(exc, TimeoutError):
            return f"Connection to SMTP server {self._address} timed out"
        if isinstance(exc, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected)):
            return f"Could not connect to SMTP server {self._address}"
        if isinstance(exc, smtplib.SMTPRecipientsRefused):
            refused = ", ".join(sorted(exc.recipients))
            return f"Recipient address rejected: {refused}"
        if isinstance(exc, smtplib.SMTPResponseException):
            return f"SMTP error from {self._address}: {_smtp_reply(exc)}"
        if isinstance(exc, smtplib.SMTPException):
            return str(exc) or "SMTP error"
        if isinstance(exc, OSError):
            return f"Could not reach SMTP server {self._address}: {exc}"
        return str(exc) or "SMTP verification failed"

    #Open a session, authenticate and ping the server without sending anything
    def verify_connection(self) -> DeliveryResult:
        if not self.transport_available:
            return DeliveryResult(success=False, error="Email transporter not available")

        try:
            with self._session() as server:
                server.noop()
        except (smtplib.SMTPException, OSError) as e:
            cause = self.describe_error(e)
            logger.warning("SMTP verification failed: %s", cause)
            return DeliveryResult(success=False, error=cause)

        logger.info("SMTP connection verified for %s", self._address)
        return DeliveryResult(success=True)

    def build_message(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
    ) -> MIMEMessage:
        config = self.config
        domain = config.from_email.rsplit("@", 1)[-1]

        from_name = _single_line(config.from_name)

        message = MIMEMessage()
        message["Subject"] = _single_line(subject)
        message["From"] = (
            formataddr((from_name, config.from_email))
            if from_name
            else config.from_email
        )
        message["To"] = to
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=domain)

        message.set_content(text or html_to_text(html))
        message.add_alternative(html, subtype="html")
        return message

    #Transmit one message; the result carries the Message-ID or the failure cause
    def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: Optional[str] = None,
    ) -> DeliveryResult:
        if not self.enabled:
            return DeliveryResult(success=False, error="Email is not enabled")

        if not self.config.from_email:
            return DeliveryResult(success=False, error="From email is not configured")

        if not self.transport_available:
            return DeliveryResult(success=False, error="Failed to create email transporter")

        try:
            message = self.build_message(to, subject, html, text)
        except ValueError as e:
            logger.warning("Email to %s could not be built: %s", to, e)
            return DeliveryResult(success=False, error=f"Invalid email message: {e}")

        try:
            with self._session() as server:
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            cause = self.describe_error(e)
            logger.warning("Email to %s failed: %s", to, cause)
            return DeliveryResult(success=False, error=cause)

        logger.info("Email sent to %s (%s)", to, message["Message-ID"])
        return DeliveryResult(success=True, message_id=message["Message-ID"])


#Header values must not carry line breaks from user input
def _single_line(value: Optional[str]) -> str:
    return " ".join((value or "").split())


def _smtp_reply(exc: smtplib.SMTPResponseException) -> str:
    reply = exc.smtp_error
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8", "replace")
    return f"{exc.smtp_code} {reply}".strip()


#Verify the connection, then send the diagnostic message only if that succeeded
def deliver_test_email(dispatcher: EmailDispatcher, to: str) -> DeliveryAttempt:
    attempt = DeliveryAttempt()

    attempt.advance(DeliveryState.VERIFYING)
    verification = dispatcher.verify_connection()
    if not verification.success:
        attempt.error = verification.error or "SMTP connection failed"
        attempt.advance(DeliveryState.VERIFY_FAILED)
        return attempt

    attempt.advance(DeliveryState.VERIFIED)

    message = render_test_email()
    attempt.advance(DeliveryState.SENDING)
    result = dispatcher.send(to, message.subject, message.html, message.text)

    if not result.success:
        attempt.error = result.error or "Failed to send test email"
        attempt.advance(DeliveryState.SEND_FAILED)
        return attempt

    attempt.message_id = result.message_id
    attempt.advance(DeliveryState.SENT)
    return attempt


#Best-effort emails after a stored submission: confirmation to the submitter, alert to the admin
def notify_contact_submission(
    dispatcher: EmailDispatcher,
    contact: Contact,
    base_url: str,
) -> dict[str, str]:
    status = {"confirmation": "skipped", "admin": "skipped"}

    if not dispatcher.enabled:
        return status

    config = dispatcher.config

    confirmation = render_confirmation(contact, config, base_url)
    result = dispatcher.send(contact.email, confirmation.subject, confirmation.html, confirmation.text)
    status["confirmation"] = "sent" if result.success else "failed"

    if config.admin_email:
        notification = render_notification(contact, config, base_url)
        result = dispatcher.send(config.admin_email, notification.subject, notification.html, notification.text)
        status["admin"] = "sent" if result.success else "failed"

    if "failed" in status.values():
        logger.warning("Contact %s stored but notifications failed: %s", contact.id, status)

    return status
