# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Bootstrap data: the first admin account and the default category tree.

Both functions are idempotent and are driven by the scripts in ``bin/``.
"""

from sqlalchemy.orm import Session

from rauta.database import generate_id
from rauta.core.config import settings
from rauta.core.logger import logger
from rauta.core.security import hash_password
from rauta.models.user import User
from rauta.models.category import Category, ProductTag

DEFAULT_CATEGORIES = [
    {"name": "Películas", "slug": "peliculas",
     "description": "Películas protetoras para telas de celular"},
    {"name": "Capinhas", "slug": "capinhas",
     "description": "Capinhas e cases para proteção do celular"},
    {"name": "Carregadores", "slug": "carregadores",
     "description": "Carregadores e cabos USB"},
    {"name": "Acessórios", "slug": "acessorios",
     "description": "Outros acessórios e peças"},
    {"name": "Manutenção", "slug": "manutencao",
     "description": "Serviços e produtos de manutenção"},
]

# parent slug -> subcategories
SUBCATEGORIES = {
    "manutencao": [
        {"name": "Celular", "slug": "celular", "description": "Manutenção de celulares"},
        {"name": "Notebook", "slug": "notebook", "description": "Manutenção de notebooks"},
        {"name": "Computador", "slug": "computador", "description": "Manutenção de computadores"},
    ],
}

# subcategory slug -> tags
TAGS = {
    "celular": [("Android", "android"), ("Apple", "apple")],
    "notebook": [("Formatação", "formatacao"), ("Outros", "outros")],
    "computador": [("Formatação", "formatacao"), ("Outros", "outros")],
}


def seed_admin(db: Session) -> User | None:
    """
    Create the admin named by FIRST_ADMIN_EMAIL / FIRST_ADMIN_PASSWORD.
    Returns the new user, or None if not configured or already present.
    """
    if not settings.first_admin_email or not settings.first_admin_password:
        logger.warning("FIRST_ADMIN_EMAIL or FIRST_ADMIN_PASSWORD not set – nothing to do")
        return None

    email = settings.first_admin_email.strip().lower()
    if db.query(User).filter(User.email == email).first():
        logger.info("Admin '%s' already exists – skipping", email)
        return None

    admin = User(
        id=generate_id("user"),
        email=email,
        name=settings.first_admin_name,
        password_hash=hash_password(settings.first_admin_password),
        role="admin",
        login_method="email",
    )
    db.add(admin)
    db.commit()
    logger.info("Admin '%s' created", email)
    return admin


def seed_categories(db: Session) -> int:
    """
    Create the default categories, subcategories and tags when the category
    table is empty.  Returns the number of categories created.
    """
    existing = db.query(Category).count()
    if existing:
        logger.info("Found %d existing categories – skipping", existing)
        return 0

    created = 0
    by_slug: dict[str, Category] = {}
    for data in DEFAULT_CATEGORIES:
        category = Category(id=generate_id("cat"), **data)
        db.add(category)
        by_slug[category.slug] = category
        created += 1

    for parent_slug, children in SUBCATEGORIES.items():
        parent = by_slug[parent_slug]
        for data in children:
            child = Category(id=generate_id("cat"), parent_id=parent.id, **data)
            db.add(child)
            created += 1
            for name, slug in TAGS.get(child.slug, []):
                db.add(ProductTag(id=generate_id("tag"), name=name, slug=slug, category_id=child.id))

    db.commit()
    logger.info("Default categories initialised (%d rows)", created)
    return created
