from dataclasses import replace

from sqlalchemy import select

from esnaf_defterim import main
from esnaf_defterim.core.security import verify_password
from esnaf_defterim.models.stock import Category
from esnaf_defterim.models.user import User, UserRole
from esnaf_defterim.services.seed import DEFAULT_CATEGORIES, seed_admin, seed_categories


def test_seed_admin_is_idempotent(db):
    assert seed_admin(db) is True
    assert seed_admin(db) is False

    admins = db.scalars(select(User)).all()
    assert len(admins) == 1
    assert admins[0].role == UserRole.ADMIN
    assert verify_password("admin123", admins[0].password_hash)


def test_seed_categories_adds_only_missing(db):
    db.add(Category(name="Dana"))
    db.commit()

    added = seed_categories(db)

    assert added == len(DEFAULT_CATEGORIES) - 1
    assert seed_categories(db) == 0
    assert len(db.scalars(select(Category)).all()) == len(DEFAULT_CATEGORIES)


def test_bootstrap_seeds_categories_without_admin(db, session_factory, monkeypatch):
    monkeypatch.setattr(
        main,
        "settings",
        replace(main.settings, auto_create_tables=False, seed_admin_enabled=False, seed_categories_enabled=True),
    )
    monkeypatch.setattr(main, "SessionLocal", session_factory)

    main._bootstrap()

    assert db.scalars(select(User)).all() == []
    assert len(db.scalars(select(Category)).all()) == len(DEFAULT_CATEGORIES)
