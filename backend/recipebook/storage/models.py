from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, DateTime, Text, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


DIFFICULTIES = ("Easy", "Medium", "Hard")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(unique=True)
    password_hash: str  # hashed by the auth layer, never here
    first_name: str
    last_name: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    recipes: List["Recipe"] = Relationship(back_populates="owner")


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=50)
    name_key: str = Field(max_length=50, index=True, unique=True)  # lower(name)

    recipes: List["Recipe"] = Relationship(back_populates="category")


class Ingredient(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    name_key: str = Field(index=True, unique=True)  # lower(name)


class Recipe(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "title_key", name="uq_recipe_owner_title"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    category_id: int = Field(foreign_key="category.id", index=True)
    title: str = Field(max_length=100)
    title_key: str = Field(max_length=100)  # lower(title), unique per owner
    prep_time_mins: int
    cook_time_mins: int
    difficulty: str  # Easy | Medium | Hard
    instructions: str = Field(sa_column=Column(Text, nullable=False))
    image_url: Optional[str] = Field(default=None, max_length=1000)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    owner: Optional[User] = Relationship(back_populates="recipes")
    category: Optional[Category] = Relationship(back_populates="recipes")
    ingredients: List["RecipeIngredient"] = Relationship(
        back_populates="recipe",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "RecipeIngredient.position",
        },
    )


class RecipeIngredient(SQLModel, table=True):
    __tablename__ = "recipe_ingredient"

    recipe_id: Optional[int] = Field(
        default=None, foreign_key="recipe.id", primary_key=True, ondelete="CASCADE"
    )
    ingredient_id: Optional[int] = Field(
        default=None, foreign_key="ingredient.id", primary_key=True, ondelete="CASCADE"
    )
    quantity: str = ""
    unit: str = ""
    position: int = 0  # index in the submitted ingredient list

    recipe: Optional[Recipe] = Relationship(back_populates="ingredients")
    ingredient: Optional[Ingredient] = Relationship()
