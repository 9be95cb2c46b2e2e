"""Read side of the catalog: latest-first listings, lookups and free-text search."""

import math
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from sqlalchemy import func, or_
from sqlmodel import Session, select

from recipebook.config import settings
from recipebook.errors import InvalidPageRequest, NotFoundError
from recipebook.logging import get_logger
from recipebook.storage.models import Category, Ingredient, Recipe, RecipeIngredient, User
from recipebook.storage.repositories import get_recipe_by_id, recipe_details

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")
_LIKE_ESCAPE = "\\"


@dataclass
class Page:
    items: list[Recipe] = field(default_factory=list)
    page: int = 0
    size: int = 0
    total: int = 0

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0


def _page_bounds(page: Optional[int], size: Optional[int]) -> tuple[int, int]:
    page = 0 if page is None else page
    size = settings.default_page_size if size is None else size
    if page < 0:
        raise InvalidPageRequest("Page index must not be negative")
    if size <= 0:
        raise InvalidPageRequest("Page size must be positive")
    return page, size


def _paginate(session: Session, ids_query, page: int, size: int) -> Page:
    """Run a recipe-id query as one page of recipes, newest first."""
    ids = ids_query.subquery()
    total = session.exec(select(func.count()).select_from(ids)).one()
    items = list(
        session.exec(
            select(Recipe)
            .where(Recipe.id.in_(select(ids.c.id)))
            .options(*recipe_details())
            .order_by(Recipe.id.desc())
            .offset(page * size)
            .limit(size)
        )
    )
    return Page(items=items, page=page, size=size, total=total)


def list_latest(
    session: Session, page: Optional[int] = None, size: Optional[int] = None
) -> Union[list[Recipe], Page]:
    """All recipes newest first; a Page when either ``page`` or ``size`` is given."""
    if page is None and size is None:
        recipes = list(session.exec(select(Recipe).options(*recipe_details()).order_by(Recipe.id.desc())))
        logger.debug("recipes.latest count=%s", len(recipes))
        return recipes
    page, size = _page_bounds(page, size)
    return _paginate(session, select(Recipe.id), page, size)


def get_recipe(session: Session, recipe_id: Optional[int]) -> Recipe:
    if recipe_id is None:
        raise NotFoundError("Recipe id is required")
    recipe = get_recipe_by_id(session, recipe_id)
    if recipe is None:
        logger.info("recipe.not_found id=%s", recipe_id)
        raise NotFoundError(f"Recipe not found: {recipe_id}")
    return recipe


def list_by_category(session: Session, name: Optional[str]) -> list[Recipe]:
    if name is None:
        return []
    normalized = _WHITESPACE.sub(" ", name.strip())
    if not normalized:
        return []
    return list(
        session.exec(
            select(Recipe)
            .join(Category, Recipe.category_id == Category.id)
            .where(Category.name_key == normalized.lower())
            .options(*recipe_details())
            .order_by(Recipe.id.desc())
        )
    )


def list_by_owner(session: Session, user: Optional[User]) -> list[Recipe]:
    if user is None or user.id is None:
        logger.debug("recipes.by_owner skipped: user has no identity")
        return []
    return list(
        session.exec(
            select(Recipe)
            .where(Recipe.user_id == user.id)
            .options(*recipe_details())
            .order_by(Recipe.id.desc())
        )
    )


def _like_pattern(query: str) -> str:
    escaped = (
        query.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )
    return f"%{escaped.lower()}%"


def search(
    session: Session, query: Optional[str], page: Optional[int] = None, size: Optional[int] = None
) -> Page:
    """
    Case-insensitive substring search over title, instructions, category and
    ingredient names. A blank query is the latest page. A recipe matching on
    several ingredients is counted once.
    """
    page, size = _page_bounds(page, size)
    if query is None or not query.strip():
        return _paginate(session, select(Recipe.id), page, size)

    pattern = _like_pattern(query.strip())
    logger.debug("recipes.search query=%r page=%s size=%s", query, page, size)
    matches = (
        select(Recipe.id)
        .outerjoin(Category, Recipe.category_id == Category.id)
        .outerjoin(RecipeIngredient, RecipeIngredient.recipe_id == Recipe.id)
        .outerjoin(Ingredient, RecipeIngredient.ingredient_id == Ingredient.id)
        .where(
            or_(
                func.lower(Recipe.title).like(pattern, escape=_LIKE_ESCAPE),
                func.lower(Recipe.instructions).like(pattern, escape=_LIKE_ESCAPE),
                func.lower(Category.name).like(pattern, escape=_LIKE_ESCAPE),
                func.lower(Ingredient.name).like(pattern, escape=_LIKE_ESCAPE),
            )
        )
        .distinct()
    )
    return _paginate(session, matches, page, size)
