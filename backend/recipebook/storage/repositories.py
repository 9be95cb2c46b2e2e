from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from recipebook.storage.models import Category, Ingredient, Recipe, RecipeIngredient, User


def recipe_details():
    """Loader options that fetch everything a recipe view needs in a few queries."""
    return (
        selectinload(Recipe.owner),
        selectinload(Recipe.category),
        selectinload(Recipe.ingredients).selectinload(RecipeIngredient.ingredient),
    )


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def username_taken(session: Session, username: str) -> bool:
    return session.exec(
        select(User.id).where(func.lower(User.username) == username.lower())
    ).first() is not None


def email_taken(session: Session, email: str) -> bool:
    return session.exec(
        select(User.id).where(func.lower(User.email) == email.lower())
    ).first() is not None


def get_category_by_key(session: Session, name_key: str) -> Optional[Category]:
    return session.exec(select(Category).where(Category.name_key == name_key)).first()


def get_ingredient_by_key(session: Session, name_key: str) -> Optional[Ingredient]:
    return session.exec(select(Ingredient).where(Ingredient.name_key == name_key)).first()


def get_recipe_by_id(session: Session, recipe_id: int) -> Optional[Recipe]:
    return session.exec(
        select(Recipe).where(Recipe.id == recipe_id).options(*recipe_details())
    ).first()


def owner_has_title(session: Session, user_id: int, title_key: str) -> bool:
    return session.exec(
        select(Recipe.id).where(Recipe.user_id == user_id, Recipe.title_key == title_key)
    ).first() is not None
