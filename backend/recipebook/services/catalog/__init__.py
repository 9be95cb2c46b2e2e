"""Recipe catalog: one writer, one reader, one deleter over the shared entity store."""

from recipebook.services.catalog.deleter import delete_recipe
from recipebook.services.catalog.reader import (
    Page,
    get_recipe,
    list_by_category,
    list_by_owner,
    list_latest,
    search,
)
from recipebook.services.catalog.resolver import resolve_category, resolve_ingredient
from recipebook.services.catalog.writer import create_recipe

__all__ = [
    "Page",
    "create_recipe",
    "delete_recipe",
    "get_recipe",
    "list_by_category",
    "list_by_owner",
    "list_latest",
    "resolve_category",
    "resolve_ingredient",
    "search",
]
