"""Recipe creation: validate everything, then write the recipe and its ingredient links as one unit."""

import re
from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session

from recipebook.config import settings
from recipebook.errors import (
    BlobStoreError,
    DuplicateTitle,
    IngredientListMismatch,
    InvalidCategory,
    InvalidDifficulty,
    InvalidDuration,
    InvalidInstructions,
    InvalidTitle,
    StorageError,
    UserNotFound,
    ValidationError,
)
from recipebook.logging import get_logger
from recipebook.services.blob_store import BlobStore, blob_store as default_blob_store
from recipebook.services.catalog.resolver import (
    normalize_category_name,
    normalize_ingredient_name,
    resolve_category,
    resolve_ingredient,
)
from recipebook.services.users import find_by_username
from recipebook.storage.models import DIFFICULTIES, Recipe, RecipeIngredient, User
from recipebook.storage.repositories import owner_has_title

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_title(raw: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", (raw or "").strip())


def _validate(
    session: Session,
    *,
    username: Optional[str],
    title: str,
    prep_time: Optional[int],
    cook_time: Optional[int],
    difficulty: Optional[str],
    instructions: Optional[str],
    ingredient_names: Optional[Sequence[str]],
    quantities: Optional[Sequence[str]],
    units: Optional[Sequence[str]],
    category_name: Optional[str],
) -> User:
    user = find_by_username(session, username) if username else None
    if user is None:
        raise UserNotFound(f"User not found: {username}")

    if not title:
        raise InvalidTitle("Recipe title cannot be empty")
    if len(title) >= settings.max_title_length:
        raise InvalidTitle(f"Recipe title must be shorter than {settings.max_title_length} characters")

    if owner_has_title(session, user.id, title.lower()):
        raise DuplicateTitle(f'You already have a recipe named "{title}".')

    category = normalize_category_name(category_name)
    if not category:
        raise InvalidCategory("Recipe category is required")
    if category not in settings.allowed_categories:
        raise InvalidCategory(f"Unknown category: {category_name.strip()}")

    if difficulty is None:
        raise InvalidDifficulty("Recipe difficulty is required")
    if difficulty not in DIFFICULTIES:
        raise InvalidDifficulty(f"Invalid difficulty level: {difficulty}")

    if prep_time is None or cook_time is None:
        raise InvalidDuration("Recipe prep and cook time are required")
    if prep_time <= 0:
        raise InvalidDuration("Recipe prep time must be positive")
    if cook_time <= 0:
        raise InvalidDuration("Recipe cook time must be positive")

    if instructions is None or not instructions.strip():
        raise InvalidInstructions("Recipe instructions cannot be blank")
    if len(instructions) > settings.max_instructions_length:
        raise InvalidInstructions("Recipe instructions are too long")

    if ingredient_names is None or quantities is None or units is None:
        raise IngredientListMismatch("Ingredients, quantities and units are required")
    if not (len(ingredient_names) == len(quantities) == len(units)):
        raise IngredientListMismatch("Ingredient, quantity and unit lists differ in length")

    return user


def _store_image(blob_store: BlobStore, image: Optional[bytes], filename: Optional[str]) -> Optional[str]:
    if not image:
        return None
    try:
        reference = blob_store.save(image, filename or "image")
    except BlobStoreError as e:
        logger.warning("recipe.image_failed filename=%s error=%s; saving without image", filename, e)
        return None
    logger.info("recipe.image_stored ref=%s", reference)
    return reference


def create_recipe(
    session: Session,
    *,
    title: Optional[str],
    prep_time: Optional[int],
    cook_time: Optional[int],
    difficulty: Optional[str],
    instructions: Optional[str],
    ingredient_names: Optional[Sequence[str]],
    quantities: Optional[Sequence[str]],
    units: Optional[Sequence[str]],
    category_name: Optional[str],
    username: Optional[str],
    image: Optional[bytes] = None,
    image_filename: Optional[str] = None,
    blob_store: Optional[BlobStore] = None,
) -> int:
    """
    Create a recipe owned by ``username`` and return its id.

    All field checks run before the store is touched. The category is resolved
    and committed on its own (resolution is idempotent); the recipe row and every
    ingredient link are then committed together or not at all.
    """
    normalized_title = normalize_title(title)
    logger.info("recipe.create.start user=%s title=%s category=%s", username, normalized_title, category_name)
    try:
        user = _validate(
            session,
            username=username,
            title=normalized_title,
            prep_time=prep_time,
            cook_time=cook_time,
            difficulty=difficulty,
            instructions=instructions,
            ingredient_names=ingredient_names,
            quantities=quantities,
            units=units,
            category_name=category_name,
        )
    except ValidationError as e:
        logger.warning("recipe.create.rejected user=%s title=%s reason=%s", username, normalized_title, e)
        raise

    try:
        category = resolve_category(session, category_name)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("category.resolve_failed name=%s", category_name)
        raise StorageError("Could not save recipe category") from exc
    except StorageError:
        session.rollback()
        raise

    image_url = _store_image(blob_store or default_blob_store, image, image_filename)

    try:
        recipe = Recipe(
            user_id=user.id,
            category_id=category.id,
            title=normalized_title,
            title_key=normalized_title.lower(),
            prep_time_mins=prep_time,
            cook_time_mins=cook_time,
            difficulty=difficulty,
            instructions=instructions,
            image_url=image_url,
        )
        session.add(recipe)
        session.flush()
        recipe_id = recipe.id

        linked: set[int] = set()
        for position, raw_name in enumerate(ingredient_names):
            if not normalize_ingredient_name(raw_name):
                continue
            ingredient = resolve_ingredient(session, raw_name)
            if ingredient.id in linked:
                logger.info("recipe.ingredient_repeated recipe=%s ingredient=%s", recipe_id, ingredient.name)
                continue
            linked.add(ingredient.id)
            session.add(
                RecipeIngredient(
                    recipe_id=recipe_id,
                    ingredient_id=ingredient.id,
                    quantity=quantities[position] or "",
                    unit=units[position] or "",
                    position=position,
                )
            )
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if owner_has_title(session, user.id, normalized_title.lower()):
            logger.warning("recipe.create.conflict user=%s title=%s", username, normalized_title)
            raise DuplicateTitle(f'You already have a recipe named "{normalized_title}".') from exc
        logger.exception("recipe.create.failed user=%s title=%s", username, normalized_title)
        raise StorageError("Could not save recipe") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("recipe.create.failed user=%s title=%s", username, normalized_title)
        raise StorageError("Could not save recipe") from exc
    except Exception:
        session.rollback()
        raise

    logger.info(
        "recipe.created id=%s user=%s title=%s category=%s ingredients=%s",
        recipe_id,
        username,
        normalized_title,
        category.name,
        len(linked),
    )
    return recipe_id
