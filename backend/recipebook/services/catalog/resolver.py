"""Find-or-create for categories and ingredients.

Lookups go through the unique ``name_key`` column. Creation is attempted inside a
SAVEPOINT; when a concurrent writer inserted the same name first, the unique
index rejects our row and we re-read theirs. Nothing here commits.
"""

import re
from typing import Callable, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from recipebook.errors import InvalidName, StorageError
from recipebook.logging import get_logger
from recipebook.storage.models import Category, Ingredient
from recipebook.storage.repositories import get_category_by_key, get_ingredient_by_key

logger = get_logger(__name__)

T = TypeVar("T", Category, Ingredient)

_WHITESPACE = re.compile(r"\s+")


def normalize_category_name(raw: Optional[str]) -> str:
    """'  dEssert ' -> 'Dessert'."""
    name = _WHITESPACE.sub(" ", (raw or "").strip())
    if not name:
        return ""
    return name[0].upper() + name[1:].lower()


def normalize_ingredient_name(raw: Optional[str]) -> str:
    return (raw or "").strip()


def _get_or_create(
    session: Session,
    model: Type[T],
    name: str,
    lookup: Callable[[Session, str], Optional[T]],
) -> T:
    kind = model.__name__.lower()
    key = name.lower()
    existing = lookup(session, key)
    if existing is not None:
        return existing

    entity = model(name=name, name_key=key)
    try:
        with session.begin_nested():
            session.add(entity)
    except IntegrityError as exc:
        logger.info("%s.create_conflict name=%s; re-reading existing row", kind, name)
        existing = lookup(session, key)
        if existing is None:
            raise StorageError(f"Could not resolve {kind} '{name}'") from exc
        return existing
    except SQLAlchemyError as exc:
        logger.exception("%s.create_failed name=%s", kind, name)
        raise StorageError(f"Could not save {kind} '{name}'") from exc

    logger.info("%s.created id=%s name=%s", kind, entity.id, entity.name)
    return entity


def resolve_category(session: Session, raw_name: Optional[str]) -> Category:
    name = normalize_category_name(raw_name)
    if not name:
        raise InvalidName("Category name cannot be blank")
    return _get_or_create(session, Category, name, get_category_by_key)


def resolve_ingredient(session: Session, raw_name: Optional[str]) -> Ingredient:
    name = normalize_ingredient_name(raw_name)
    if not name:
        raise InvalidName("Ingredient name cannot be blank")
    return _get_or_create(session, Ingredient, name, get_ingredient_by_key)
