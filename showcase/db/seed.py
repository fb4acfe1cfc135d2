import logging

from sqlalchemy.orm import Session

from showcase.core.config import Settings, EMAIL_CONFIG_ID
from showcase.core.security import hash_password
from showcase.db.models import Admin, EmailConfig

logger = logging.getLogger(__name__)


def seed_admin(db: Session, settings: Settings):
    existing = db.query(Admin).first()
    if existing:
        return

    admin = Admin(
        email=settings.ADMIN_EMAIL.strip().lower(),
        hashed_password=hash_password(settings.ADMIN_PASSWORD),
        name="Administrator",
    )

    db.add(admin)
    db.commit()
    logger.info("Seeded admin account %s", admin.email)


#Create the email config row from SMTP_* settings the first time the app starts
def seed_email_config(db: Session, settings: Settings):
    existing = db.get(EmailConfig, EMAIL_CONFIG_ID)
    if existing:
        return

    config = EmailConfig(
        id=EMAIL_CONFIG_ID,
        enabled=bool(settings.SMTP_HOST and settings.SMTP_FROM_EMAIL),
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SMTP_USER,
        smtp_password=settings.SMTP_PASSWORD,
        smtp_secure=settings.SMTP_SECURE,
        from_email=settings.SMTP_FROM_EMAIL,
        from_name=settings.SMTP_FROM_NAME,
        admin_email=settings.SMTP_ADMIN_EMAIL,
        updated_by="system",
    )

    db.add(config)
    db.commit()
    logger.info("Seeded email config (enabled=%s)", config.enabled)
