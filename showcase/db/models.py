import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Boolean,
    Enum,
    JSON,
    Text,
)
from showcase.db.base import Base


def _utcnow():
    return datetime.now(timezone.utc)


def _uuid():
    return str(uuid.uuid4())


# =========================================================
# SHARED ENUMS (centralised to avoid duplication issues):
# =========================================================


#Purpose of a contact submission
class InquiryType(str, enum.Enum):
    GENERAL_INQUIRY = "GENERAL_INQUIRY"
    REQUEST_DEMO = "REQUEST_DEMO"
    CONTACT_SALES = "CONTACT_SALES"
    TECHNICAL_SUPPORT = "TECHNICAL_SUPPORT"
    OTHER = "OTHER"


#Channel the submitter prefers for a reply
class ContactMethod(str, enum.Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    EITHER = "EITHER"


#Release state of a showcased product
class ProductStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    COMING_SOON = "COMING_SOON"
    IN_DEVELOPMENT = "IN_DEVELOPMENT"


#Actor type used in audit logging
ActorTypeEnum = Enum("system", "admin", name="actor_type_enum")


# =========================================================
# CONTACTS (public contact form submissions):
# =========================================================


#Represents a validated contact form submission
class Contact(Base):
    __tablename__ = "contacts"

    id = Column(String(36), primary_key=True, default=_uuid)

    #Submitter details
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    company = Column(String(200), nullable=True)
    phone = Column(String(20), nullable=True)

    #What the enquiry is about
    product = Column(String(100), nullable=True, index=True)
    inquiry_type = Column(
        Enum(InquiryType, name="inquiry_type_enum", native_enum=False),
        nullable=False,
        index=True,
    )
    message = Column(Text, nullable=False)
    preferred_method = Column(
        Enum(ContactMethod, name="contact_method_enum", native_enum=False),
        nullable=False,
        default=ContactMethod.EMAIL,
    )
    source = Column(String(100), nullable=False, default="website")

    #Admin workflow flags
    read = Column(Boolean, nullable=False, default=False, index=True)
    responded = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)


# =========================================================
# PRODUCTS (public showcase):
# =========================================================


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    tagline = Column(String(300), nullable=True)
    description = Column(Text, nullable=False, default="")
    status = Column(
        Enum(ProductStatus, name="product_status_enum", native_enum=False),
        nullable=False,
        default=ProductStatus.IN_DEVELOPMENT,
    )

    #Media and external links
    thumbnail = Column(String, nullable=True)
    github_url = Column(String, nullable=True)
    youtube_url = Column(String, nullable=True)
    demo_url = Column(String, nullable=True)

    pricing = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


# =========================================================
# EMAIL CONFIG (outbound SMTP settings, single row):
# =========================================================


class EmailConfig(Base):
    __tablename__ = "email_config"

    id = Column(String(50), primary_key=True)
    enabled = Column(Boolean, nullable=False, default=False)

    #SMTP transport
    smtp_host = Column(String, nullable=True)
    smtp_port = Column(Integer, nullable=True)
    smtp_user = Column(String, nullable=True)
    smtp_password = Column(String, nullable=True)
    smtp_secure = Column(Boolean, nullable=False, default=True)

    #Sender and recipients
    from_email = Column(String, nullable=True)
    from_name = Column(String, nullable=True)
    admin_email = Column(String, nullable=True)

    #Optional overrides for the default message bodies
    confirmation_template = Column(Text, nullable=True)
    notification_template = Column(Text, nullable=True)

    updated_by = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


# =========================================================
# ADMINS (platform administrators):
# =========================================================


#Represents an administrator with elevated privileges
class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)


# =========================================================
# AUDIT LOGS (immutable security trail):
# =========================================================


#Immutable audit log entry for security-sensitive actions
class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True)
    actor_type = Column(ActorTypeEnum, nullable=False)
    actor_id = Column(Integer, nullable=True, index=True)
    action = Column(String, nullable=False)
    details = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
