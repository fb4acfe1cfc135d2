from typing import Any

from email_validator import validate_email, EmailNotValidError
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from showcase.api.deps import (
    get_admin_json_body,
    get_current_admin,
    get_email_dispatcher,
    parse_body,
)
from showcase.core.config import EMAIL_CONFIG_ID
from showcase.db.session import get_db
from showcase.db.models import Admin, EmailConfig
from showcase.schemas.admin import (
    EmailConfigEnvelope,
    EmailConfigOut,
    EmailConfigUpdate,
    SendTestEmailOut,
)
from showcase.services.audit import log_action
from showcase.services.email import DeliveryState, EmailDispatcher, deliver_test_email

router = APIRouter(prefix="/admin/email-config", tags=["Admin Email"])

"""
EMAIL CONFIG ROUTES => OUTBOUND EMAIL SETTINGS

Admins read and replace the SMTP settings and can run a
verify-then-send diagnostic against them.
"""


@router.get("", response_model=EmailConfigEnvelope)
def read_email_config(
    admin: Admin = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    config = db.get(EmailConfig, EMAIL_CONFIG_ID)

    if not config:
        raise HTTPException(404, "Email configuration not found")

    return EmailConfigEnvelope(config=EmailConfigOut.model_validate(config))


#Create or replace the settings; the stored password survives a blank one
@router.put("", response_model=EmailConfigEnvelope)
def update_email_config(
    admin: Admin = Depends(get_current_admin),
    body: Any = Depends(get_admin_json_body),
    db: Session = Depends(get_db),
):
    payload = parse_body(EmailConfigUpdate, body)

    config = db.get(EmailConfig, EMAIL_CONFIG_ID)
    if not config:
        config = EmailConfig(id=EMAIL_CONFIG_ID)
        db.add(config)

    values = payload.model_dump()
    if values["smtp_password"] is None:
        values.pop("smtp_password")

    for field, value in values.items():
        setattr(config, field, value)
    config.updated_by = admin.email

    db.commit()

    log_action(
        db=db,
        actor_id=admin.id,
        action="email_config.updated",
        details=f"enabled={config.enabled},host={config.smtp_host}",
    )

    return EmailConfigEnvelope(config=EmailConfigOut.model_validate(config))


#Verify the SMTP connection, then send a test message to the given address
@router.post("/test", response_model=SendTestEmailOut)
def send_test_email(
    admin: Admin = Depends(get_current_admin),
    payload: Any = Depends(get_admin_json_body),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    db: Session = Depends(get_db),
):
    to = payload.get("to") if isinstance(payload, dict) else None

    if not to or not isinstance(to, str):
        raise HTTPException(400, "Email address is required")

    try:
        validate_email(to, check_deliverability=False)
    except EmailNotValidError:
        raise HTTPException(400, "Invalid email address")

    attempt = deliver_test_email(dispatcher, to)

    log_action(
        db=db,
        actor_id=admin.id,
        action="email_config.test",
        details=f"to={to},state={attempt.state.value}",
    )

    if attempt.state != DeliveryState.SENT:
        raise HTTPException(500, attempt.error)

    return SendTestEmailOut(message_id=attempt.message_id)
