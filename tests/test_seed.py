"""Tests for the bootstrap helpers."""

from __future__ import annotations

from rauta.core.config import settings
from rauta.core.security import verify_password
from rauta.models.category import Category, ProductTag
from rauta.models.user import User
from rauta.seed import seed_admin, seed_categories


def test_seed_categories_builds_default_tree(db_session):
    created = seed_categories(db_session)

    assert created == 8
    parent = db_session.query(Category).filter_by(slug="manutencao").one()
    children = {c.slug for c in db_session.query(Category).filter_by(parent_id=parent.id)}
    assert children == {"celular", "notebook", "computador"}
    assert db_session.query(ProductTag).count() == 6


def test_seed_categories_skips_populated_table(db_session):
    seed_categories(db_session)

    assert seed_categories(db_session) == 0
    assert db_session.query(Category).count() == 8


def test_seed_admin(db_session, monkeypatch):
    monkeypatch.setattr(settings, "first_admin_email", "Boss@Example.com")
    monkeypatch.setattr(settings, "first_admin_password", "bosspw1")

    admin = seed_admin(db_session)

    assert admin.role == "admin"
    assert admin.email == "boss@example.com"
    assert verify_password("bosspw1", admin.password_hash)
    assert seed_admin(db_session) is None
    assert db_session.query(User).count() == 1


def test_seed_admin_without_configuration(db_session, monkeypatch):
    monkeypatch.setattr(settings, "first_admin_email", "")

    assert seed_admin(db_session) is None
