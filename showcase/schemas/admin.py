from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel

"""
ADMIN SCHEMA
"""


#Payload used by admins to authenticate via the admin login endpoint
class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


_camel = ConfigDict(populate_by_name=True, alias_generator=to_camel)


#Email settings as shown to admins; the SMTP password is never included
class EmailConfigOut(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    id: str
    enabled: bool
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_secure: bool
    from_email: Optional[str] = None
    from_name: Optional[str] = None
    admin_email: Optional[str] = None
    confirmation_template: Optional[str] = None
    notification_template: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class EmailConfigEnvelope(BaseModel):
    config: EmailConfigOut


#Full replacement of the email settings; a blank password keeps the stored one
class EmailConfigUpdate(BaseModel):
    model_config = _camel

    enabled: bool = False
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    smtp_secure: bool = True
    from_email: Optional[str] = None
    from_name: Optional[str] = None
    admin_email: Optional[str] = None
    confirmation_template: Optional[str] = None
    notification_template: Optional[str] = None

    @field_validator(
        "smtp_host",
        "smtp_port",
        "smtp_user",
        "smtp_password",
        "from_email",
        "from_name",
        "admin_email",
        "confirmation_template",
        "notification_template",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, value: Any):
        if isinstance(value, str) and not value.strip():
            return None
        return value


#Result of the admin "send test email" diagnostic
class SendTestEmailOut(BaseModel):
    model_config = _camel

    success: bool = True
    message: str = "Test email sent successfully"
    message_id: Optional[str] = None
