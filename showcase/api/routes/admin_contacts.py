from typing import Any, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from showcase.api.deps import get_admin_json_body, get_current_admin, parse_body
from showcase.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from showcase.db.session import get_db
from showcase.db.models import Admin, InquiryType
from showcase.schemas.contact import ContactListOut, ContactOut, ContactStatusUpdate, Pagination
from showcase.services.audit import log_action
from showcase.services.contacts import (
    contact_stats,
    get_contact,
    list_contacts,
    update_contact_status,
)

router = APIRouter(
    prefix="/admin",
    tags=["Admin Contacts"],
    dependencies=[Depends(get_current_admin)],
)


"""
ADMIN CONTACT ROUTES => SUBMITTED ENQUIRIES

Listing with search, filters and pagination, single contact
lookup, read/responded flags and dashboard statistics.
"""

#Retrieve contacts with filtering, sorting, and pagination
@router.get("/contacts", response_model=ContactListOut)
def admin_list_contacts(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    inquiry_type: Optional[InquiryType] = Query(None, alias="inquiryType"),
    read: Optional[bool] = Query(None),
    responded: Optional[bool] = Query(None),
    sort_by: Literal["createdAt", "name", "email", "inquiryType"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    contacts, pagination = list_contacts(
        db,
        page=page,
        limit=limit,
        search=search,
        inquiry_type=inquiry_type,
        read=read,
        responded=responded,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    return ContactListOut(
        contacts=[ContactOut.model_validate(c) for c in contacts],
        pagination=Pagination(**pagination),
    )


@router.get("/contacts/{contact_id}", response_model=ContactOut)
def admin_get_contact(
    contact_id: str,
    db: Session = Depends(get_db),
):
    contact = get_contact(db, contact_id)

    if not contact:
        raise HTTPException(404, "Contact not found")

    return ContactOut.model_validate(contact)


#Mark a contact as read and/or responded
@router.patch("/contacts/{contact_id}", response_model=ContactOut)
def admin_update_contact(
    contact_id: str,
    admin: Admin = Depends(get_current_admin),
    body: Any = Depends(get_admin_json_body),
    db: Session = Depends(get_db),
):
    payload = parse_body(ContactStatusUpdate, body)

    contact = get_contact(db, contact_id)

    if not contact:
        raise HTTPException(404, "Contact not found")

    contact = update_contact_status(
        db,
        contact,
        read=payload.read,
        responded=payload.responded,
    )

    log_action(
        db=db,
        actor_id=admin.id,
        action="contact.status_changed",
        details=f"contact_id={contact.id},read={contact.read},responded={contact.responded}",
    )

    return ContactOut.model_validate(contact)


#Return contact statistics for the admin dashboard
@router.get("/stats")
def admin_stats(
    db: Session = Depends(get_db),
):
    return contact_stats(db)
