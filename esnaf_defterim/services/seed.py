import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from esnaf_defterim.core.config import settings
from esnaf_defterim.core.security import hash_password
from esnaf_defterim.models.stock import Category
from esnaf_defterim.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Dana", "Dana eti ürünleri"),
    ("Tavuk", "Tavuk eti ürünleri"),
    ("Kuzu", "Kuzu eti ürünleri"),
    ("Kıyma", "Kıyma ürünleri"),
    ("Şarküteri", "Şarküteri ürünleri"),
    ("Diğer", "Diğer et ürünleri"),
)


def seed_admin(db: Session) -> bool:
    email = settings.seed_admin_email.strip().lower()
    existing = db.scalar(select(User).where(func.lower(User.email) == email))
    if existing:
        logger.info("admin user already present: %s", email)
        return False

    db.add(
        User(
            name="Admin",
            email=email,
            password_hash=hash_password(settings.seed_admin_password),
            role=UserRole.ADMIN,
            is_active=True,
        )
    )
    db.commit()
    logger.info("seeded admin user: %s", email)
    return True


def seed_categories(db: Session) -> int:
    existing = set(db.scalars(select(Category.name)).all())
    added = 0
    for name, description in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        db.add(Category(name=name, description=description))
        added += 1
    if added:
        db.commit()
        logger.info("seeded %d default categories", added)
    return added
