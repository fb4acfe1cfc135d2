import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from showcase.api.deps import get_email_dispatcher, get_settings
from showcase.core.config import Settings
from showcase.core.errors import ContactValidationError, ContactStorageError
from showcase.db.session import get_db
from showcase.schemas.contact import ContactOut, ContactSubmitOut, validate_contact
from showcase.services.contacts import create_contact
from showcase.services.email import EmailDispatcher, notify_contact_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])


"""
CONTACT ROUTES => PUBLIC CONTACT FORM

Validates the submission, stores it, then sends best-effort
confirmation and admin notification emails.
"""


# =========================
# 🔓 PUBLIC: submit contact
# =========================
@router.post("", response_model=ContactSubmitOut)
def submit_contact(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    dispatcher: EmailDispatcher = Depends(get_email_dispatcher),
    settings: Settings = Depends(get_settings),
):
    try:
        submission = validate_contact(payload)
    except ContactValidationError as e:
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": e.errors},
        )

    try:
        contact = create_contact(db, submission)
    except ContactStorageError:
        raise HTTPException(
            status_code=500,
            detail="Failed to submit contact form",
        )

    #The contact is saved; email problems are reported, not raised
    try:
        notifications = notify_contact_submission(dispatcher, contact, settings.BASE_URL)
    except Exception:
        logger.exception("Error sending email notifications for contact %s", contact.id)
        notifications = {"confirmation": "failed", "admin": "failed"}

    return ContactSubmitOut(
        contact=ContactOut.model_validate(contact),
        notifications=notifications,
    )
