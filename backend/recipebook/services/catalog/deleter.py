from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from recipebook.errors import StorageError, UnauthorizedError
from recipebook.logging import get_logger
from recipebook.storage.models import Recipe, User

logger = get_logger(__name__)


def _check_owner(recipe: Recipe, user: User) -> None:
    if recipe.user_id != user.id:
        raise UnauthorizedError(f"User {user.id} does not own recipe {recipe.id}")


def delete_recipe(session: Session, recipe_id: Optional[int], user: Optional[User]) -> bool:
    """
    Delete a recipe (and its ingredient links) if ``user`` owns it.

    Missing arguments, unknown ids and foreign recipes are no-ops, so the call is
    idempotent. Returns True only when a row was removed.
    """
    if recipe_id is None or user is None or user.id is None:
        logger.warning("recipe.delete_skipped id=%s reason=missing id or user", recipe_id)
        return False

    recipe = session.get(Recipe, recipe_id)
    if recipe is None:
        logger.info("recipe.delete_skipped id=%s reason=not found", recipe_id)
        return False

    try:
        _check_owner(recipe, user)
    except UnauthorizedError as e:
        logger.warning("recipe.delete_skipped id=%s reason=%s", recipe_id, e)
        return False

    try:
        session.delete(recipe)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("recipe.delete_failed id=%s", recipe_id)
        raise StorageError(f"Could not delete recipe {recipe_id}") from exc
    logger.info("recipe.deleted id=%s user=%s", recipe_id, user.id)
    return True
