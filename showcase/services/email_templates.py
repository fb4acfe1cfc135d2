import html
import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from showcase.db.models import Contact, EmailConfig

"""
EMAIL TEMPLATES

Pure rendering: every function returns a subject/html/text triple and
never touches the network or database.
"""

_TAG_RE = re.compile(r"<[^>]*>")
_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class EmailMessage(BaseModel):
    subject: str
    html: str
    text: str
    to: Optional[str] = None


DEFAULT_CONFIRMATION_TEMPLATE = """
    <h2>Thank You for Contacting Studio42.dev</h2>
    <p>Hello {name},</p>
    <p>We have received your inquiry and will get back to you as soon as possible.</p>
    <p><strong>Your Message:</strong></p>
    <p>{message}</p>
    <p>Best regards,<br>The Studio42.dev Team</p>
"""

DEFAULT_NOTIFICATION_TEMPLATE = """
    <h2>New Contact Form Submission</h2>
    <p>A new contact form has been submitted:</p>
    <ul>
      <li><strong>Name:</strong> {name}</li>
      <li><strong>Email:</strong> {email}</li>
      <li><strong>Company:</strong> {company}</li>
      <li><strong>Phone:</strong> {phone}</li>
      <li><strong>Product:</strong> {product}</li>
      <li><strong>Inquiry Type:</strong> {inquiryType}</li>
      <li><strong>Message:</strong> {message}</li>
      <li><strong>Source:</strong> {source}</li>
      <li><strong>Submitted:</strong> {timestamp}</li>
    </ul>
    <p><a href="{adminDashboardUrl}">View in Admin Dashboard</a></p>
"""


#Plain-text fallback for an html body
def html_to_text(body: str) -> str:
    return html.unescape(_TAG_RE.sub("", body))


#Substitute {placeholder} tokens; unknown placeholders are left untouched
def replace_variables(template: str, variables: dict[str, str]) -> str:
    def _sub(match: re.Match) -> str:
        key = match.group(1)
        if key not in variables:
            return match.group(0)
        return html.escape(variables[key])

    return _PLACEHOLDER_RE.sub(_sub, template)


def _format_timestamp(value: datetime) -> str:
    return value.strftime("%d %B %Y %H:%M")


def contact_variables(contact: Contact, base_url: str) -> dict[str, str]:
    return {
        "name": contact.name,
        "email": contact.email,
        "company": contact.company or "N/A",
        "phone": contact.phone or "N/A",
        "product": contact.product or "General Inquiry",
        "inquiryType": contact.inquiry_type.value,
        "message": contact.message,
        "source": contact.source or "website",
        "timestamp": _format_timestamp(contact.created_at),
        "adminDashboardUrl": f"{base_url.rstrip('/')}/admin/contacts/{contact.id}",
    }


#Acknowledgement sent to the person who submitted the form
def render_confirmation(
    contact: Contact,
    config: EmailConfig,
    base_url: str,
) -> EmailMessage:
    template = config.confirmation_template or DEFAULT_CONFIRMATION_TEMPLATE
    body = replace_variables(template, contact_variables(contact, base_url))

    return EmailMessage(
        subject=f"Thank You for Contacting Studio42.dev - {contact.inquiry_type.value}",
        html=body,
        text=html_to_text(body),
        to=contact.email,
    )


#Alert sent to the configured admin inbox
def render_notification(
    contact: Contact,
    config: EmailConfig,
    base_url: str,
) -> EmailMessage:
    template = config.notification_template or DEFAULT_NOTIFICATION_TEMPLATE
    body = replace_variables(template, contact_variables(contact, base_url))

    return EmailMessage(
        subject=f"New Contact: {contact.name} - {contact.inquiry_type.value}",
        html=body,
        text=html_to_text(body),
        to=config.admin_email,
    )


def render_test_email(now: Optional[datetime] = None) -> EmailMessage:
    sent_at = _format_timestamp(now or datetime.now(timezone.utc))
    body = f"""
    <h2>Test Email from Studio42.dev</h2>
    <p>This is a test email to verify your email configuration is working correctly.</p>
    <p>If you received this email, your SMTP settings are configured properly!</p>
    <p>Sent at: {sent_at}</p>
    """

    return EmailMessage(
        subject="Test Email - Studio42.dev",
        html=body,
        text=html_to_text(body),
    )


TEMPLATES = {
    "test": render_test_email,
    "confirmation": render_confirmation,
    "notification": render_notification,
}


#Render a message by template kind
def render(kind: str, **context) -> EmailMessage:
    try:
        renderer = TEMPLATES[kind]
    except KeyError:
        raise ValueError(f"Unknown email template: {kind}") from None

    return renderer(**context)
