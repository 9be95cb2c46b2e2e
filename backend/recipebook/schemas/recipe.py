from datetime import datetime

from pydantic import BaseModel

from recipebook.services.catalog import Page
from recipebook.storage.models import Recipe


class IngredientLine(BaseModel):
    ingredient_id: int
    name: str
    quantity: str
    unit: str


class RecipeRead(BaseModel):
    id: int
    title: str
    prep_time_mins: int
    cook_time_mins: int
    difficulty: str
    instructions: str
    image_url: str | None = None
    category: str
    owner: str
    created_at: datetime
    ingredients: list[IngredientLine] = []


class RecipePage(BaseModel):
    items: list[RecipeRead]
    page: int
    size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool


class RecipeCreated(BaseModel):
    id: int


def recipe_to_read(recipe: Recipe) -> RecipeRead:
    return RecipeRead(
        id=recipe.id,
        title=recipe.title,
        prep_time_mins=recipe.prep_time_mins,
        cook_time_mins=recipe.cook_time_mins,
        difficulty=recipe.difficulty,
        instructions=recipe.instructions,
        image_url=recipe.image_url,
        category=recipe.category.name,
        owner=recipe.owner.username,
        created_at=recipe.created_at,
        ingredients=[
            IngredientLine(
                ingredient_id=link.ingredient_id,
                name=link.ingredient.name,
                quantity=link.quantity,
                unit=link.unit,
            )
            for link in recipe.ingredients
        ],
    )


def page_to_read(page: Page) -> RecipePage:
    return RecipePage(
        items=[recipe_to_read(r) for r in page.items],
        page=page.page,
        size=page.size,
        total=page.total,
        total_pages=page.total_pages,
        has_next=page.has_next,
        has_previous=page.has_previous,
    )
