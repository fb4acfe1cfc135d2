from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from showcase.api.deps import get_settings
from showcase.core.config import Settings
from showcase.core.rate_limit import RATE_LIMITS, make_key
from showcase.core.security import verify_password, create_access_token
from showcase.db.session import get_db
from showcase.db.models import Admin
from showcase.schemas.admin import AdminLogin, TokenOut
from showcase.services.audit import log_action

router = APIRouter(prefix="/admin/auth", tags=["Admin Auth"])

"""
ADMIN AUTH ROUTES => DASHBOARD LOGIN

Exchanges the seeded admin's credentials for a bearer token used
by the contact inbox and email settings screens.
"""


#Throttled per caller address and email; every outcome lands in the audit log
@router.post("/login", response_model=TokenOut)
def admin_login(
    payload: AdminLogin,
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    email = payload.email.strip().lower()

    max_attempts, window = RATE_LIMITS["admin_login"]
    if not request.app.state.rate_limiter.hit(
        make_key(request, "admin_login", email), max_attempts, window
    ):
        raise HTTPException(status_code=429, detail="Too many login attempts")

    admin = db.query(Admin).filter(Admin.email == email).first()
    accepted = admin is not None and verify_password(payload.password, admin.hashed_password)

    log_action(
        db=db,
        actor_id=admin.id if accepted else None,
        action="admin.login" if accepted else "admin.login_failed",
        details=f"email={email}",
    )

    if not accepted:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    admin.last_login = datetime.now(timezone.utc)
    db.commit()

    return TokenOut(
        access_token=create_access_token(
            {"sub": str(admin.id), "type": "admin"},
            settings.JWT_SECRET_KEY,
            settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        )
    )
