import logging
import math
from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from showcase.core.errors import ContactStorageError
from showcase.db.models import Contact, InquiryType
from showcase.schemas.contact import ContactSubmission

logger = logging.getLogger(__name__)

DEFAULT_SOURCE = "website"

#Columns the admin listing may be ordered by
SORTABLE_COLUMNS = {
    "createdAt": Contact.created_at,
    "name": Contact.name,
    "email": Contact.email,
    "inquiryType": Contact.inquiry_type,
}


#Where a submission came from: the product it was about, else the site itself
def derive_source(submission: ContactSubmission) -> str:
    return submission.product or DEFAULT_SOURCE


#Insert exactly one contact row for a validated submission
def create_contact(db: Session, submission: ContactSubmission) -> Contact:
    contact = Contact(
        name=submission.name,
        email=submission.email,
        company=submission.company,
        phone=submission.phone,
        product=submission.product,
        inquiry_type=submission.inquiry_type,
        message=submission.message,
        preferred_method=submission.contact_method,
        source=derive_source(submission),
        read=False,
        responded=False,
    )

    try:
        db.add(contact)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to store contact from %s", submission.email)
        raise ContactStorageError("Failed to store contact") from e

    logger.info("Stored contact %s (source=%s)", contact.id, contact.source)
    return contact


def get_contact(db: Session, contact_id: str) -> Contact | None:
    return db.get(Contact, contact_id)


#Filtered, sorted and paginated admin view of contacts
def list_contacts(
    db: Session,
    *,
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
    inquiry_type: Optional[InquiryType] = None,
    read: Optional[bool] = None,
    responded: Optional[bool] = None,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
) -> tuple[list[Contact], dict]:
    query = db.query(Contact)

    if search:
        like = f"%{search}%"
        query = query.filter(
            or_(
                Contact.name.ilike(like),
                Contact.email.ilike(like),
                Contact.company.ilike(like),
                Contact.message.ilike(like),
            )
        )

    if inquiry_type is not None:
        query = query.filter(Contact.inquiry_type == inquiry_type)

    if read is not None:
        query = query.filter(Contact.read == read)

    if responded is not None:
        query = query.filter(Contact.responded == responded)

    total = query.count()

    column = SORTABLE_COLUMNS.get(sort_by, Contact.created_at)
    ordering = column.asc() if sort_order == "asc" else column.desc()

    contacts = (
        query
        .order_by(ordering)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": math.ceil(total / limit) if limit else 0,
    }

    return contacts, pagination


#Set the read/responded flags an admin changed; untouched flags stay as they are
def update_contact_status(
    db: Session,
    contact: Contact,
    *,
    read: Optional[bool] = None,
    responded: Optional[bool] = None,
) -> Contact:
    if read is not None:
        contact.read = read
    if responded is not None:
        contact.responded = responded

    db.commit()
    return contact


#Dashboard counters plus the most recent submissions
def contact_stats(db: Session, recent: int = 5) -> dict:
    total = db.query(Contact).count()
    unread = db.query(Contact).filter(Contact.read.is_(False)).count()
    responded = db.query(Contact).filter(Contact.responded.is_(True)).count()

    by_type = (
        db.query(Contact.inquiry_type, func.count(Contact.id))
        .group_by(Contact.inquiry_type)
        .all()
    )

    latest = (
        db.query(Contact)
        .order_by(Contact.created_at.desc())
        .limit(recent)
        .all()
    )

    return {
        "totalContacts": total,
        "unreadContacts": unread,
        "respondedContacts": responded,
        "contactsByType": {
            InquiryType(kind).value: count for kind, count in by_type
        },
        "recentContacts": [
            {
                "id": c.id,
                "name": c.name,
                "email": c.email,
                "inquiryType": c.inquiry_type.value,
                "createdAt": c.created_at.isoformat(),
            }
            for c in latest
        ],
    }
