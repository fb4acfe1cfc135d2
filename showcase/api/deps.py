import json
from typing import Any

from fastapi import Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from showcase.core.config import Settings, EMAIL_CONFIG_ID
from showcase.core.security import decode_access_token
from showcase.db.session import get_db
from showcase.db.models import Admin, EmailConfig
from showcase.services.email import EmailDispatcher

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=401, detail="Unauthorized")


# =========================
# 🔒 Admin auth
# =========================
#Every failure looks the same to the caller: missing, forged, expired or orphaned tokens
def get_current_admin(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> Admin:
    if creds is None:
        raise _unauthorized()

    payload = decode_access_token(creds.credentials, settings.JWT_SECRET_KEY)
    if not payload or payload.get("type") != "admin":
        raise _unauthorized()

    try:
        admin_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized()

    admin = db.get(Admin, admin_id)
    if not admin:
        raise _unauthorized()

    return admin


#Admin routes read their JSON body here so an unauthenticated caller never reaches parsing
async def get_admin_json_body(
    request: Request,
    admin: Admin = Depends(get_current_admin),
) -> Any:
    raw = await request.body()
    if not raw:
        return None

    try:
        return json.loads(raw)
    except ValueError as e:
        raise RequestValidationError([{
            "type": "json_invalid",
            "loc": ("body", getattr(e, "pos", 0)),
            "msg": "JSON decode error",
            "input": {},
        }])


def parse_body(model: type[BaseModel], body: Any) -> BaseModel:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError([
            {**err, "loc": ("body", *err["loc"])} for err in e.errors()
        ])


# =========================
# ✉️ Email
# =========================
def get_email_config(db: Session = Depends(get_db)) -> EmailConfig | None:
    return db.get(EmailConfig, EMAIL_CONFIG_ID)


#SMTP factory the dispatcher uses; tests swap it through app.state
def get_smtp_factory(request: Request):
    return request.app.state.smtp_factory


def get_email_dispatcher(
    config: EmailConfig | None = Depends(get_email_config),
    smtp_factory=Depends(get_smtp_factory),
    settings: Settings = Depends(get_settings),
) -> EmailDispatcher:
    return EmailDispatcher(
        config,
        smtp_factory=smtp_factory,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )
