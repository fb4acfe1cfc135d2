from datetime import datetime
from typing import Any, Mapping, Optional

from email_validator import validate_email, EmailNotValidError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from showcase.core.errors import ContactValidationError
from showcase.db.models import InquiryType, ContactMethod

"""
CONTACT SCHEMA => VALIDATION GATE

A submission is either valid in every field or rejected with the full
list of violations. Empty optional strings mean "not provided".
"""


#Human-readable names used in validation messages, keyed by input field
FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "company": "Company name",
    "phone": "Phone number",
    "product": "Product name",
    "inquiryType": "inquiry type",
    "message": "Message",
    "contactMethod": "contact method",
}

ENUM_FIELDS = {
    "inquiryType": InquiryType,
    "contactMethod": ContactMethod,
}


#Payload accepted from the public contact form
class ContactSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=2, max_length=100)
    email: str = Field(max_length=255)
    company: Optional[str] = Field(default=None, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=20)
    product: Optional[str] = Field(default=None, max_length=100)
    inquiry_type: InquiryType = Field(alias="inquiryType")
    message: str = Field(min_length=10, max_length=5000)
    contact_method: ContactMethod = Field(alias="contactMethod")

    @field_validator("company", "phone", "product", mode="before")
    @classmethod
    def empty_to_none(cls, value: Any):
        if value == "":
            return None
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Invalid email address")
        return value


def _error_message(field: str, err: dict) -> str:
    label = FIELD_LABELS.get(field, field)
    ctx = err.get("ctx") or {}
    kind = err["type"]

    if kind == "missing":
        return f"{label[0].upper()}{label[1:]} is required"
    if kind == "string_too_short":
        return f"{label} must be at least {ctx['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} must be less than {ctx['max_length']} characters"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "enum" and field in ENUM_FIELDS:
        allowed = ", ".join(member.value for member in ENUM_FIELDS[field])
        return f"Invalid {label}. Expected one of: {allowed}"
    if kind == "value_error" and "error" in ctx:
        return str(ctx["error"])

    return err["msg"]


#Translate pydantic errors into field/message pairs, one per violation
def format_validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        errors.append({
            "field": field,
            "message": _error_message(field, err),
        })
    return errors


#Validate an untyped key-value payload into a normalized submission
def validate_contact(data: Mapping[str, Any]) -> ContactSubmission:
    if not isinstance(data, Mapping):
        raise ContactValidationError(
            [{"field": "body", "message": "Request body must be a JSON object"}]
        )

    try:
        return ContactSubmission.model_validate(dict(data))
    except ValidationError as e:
        raise ContactValidationError(format_validation_errors(e)) from e


#Persisted contact returned to clients
class ContactOut(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    name: str
    email: str
    company: Optional[str] = None
    phone: Optional[str] = None
    product: Optional[str] = None
    inquiry_type: InquiryType
    message: str
    preferred_method: ContactMethod
    source: str
    read: bool
    responded: bool
    created_at: datetime


#Outcome of the best-effort emails sent after a submission
class NotificationStatus(BaseModel):
    confirmation: str = "skipped"
    admin: str = "skipped"


class ContactSubmitOut(BaseModel):
    success: bool = True
    contact: ContactOut
    notifications: NotificationStatus


#Admin flags that may be changed on an existing contact
class ContactStatusUpdate(BaseModel):
    read: Optional[bool] = None
    responded: Optional[bool] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(serialization_alias="totalPages")


class ContactListOut(BaseModel):
    contacts: list[ContactOut]
    pagination: Pagination
