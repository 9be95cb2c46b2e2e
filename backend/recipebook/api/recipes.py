from fastapi import APIRouter, Depends, File, Form, Response, UploadFile
from sqlmodel import Session

from recipebook.logging import get_logger
from recipebook.schemas.recipe import RecipeCreated, RecipePage, RecipeRead, page_to_read, recipe_to_read
from recipebook.services import catalog
from recipebook.services.users import find_by_username
from recipebook.storage.db import session_dependency

router = APIRouter()
logger = get_logger(__name__)


@router.post("/recipes", response_model=RecipeCreated, status_code=201)
async def create_recipe(
    username: str = Form(...),
    title: str | None = Form(default=None),
    prep_time: int | None = Form(default=None),
    cook_time: int | None = Form(default=None),
    difficulty: str | None = Form(default=None),
    instructions: str | None = Form(default=None),
    category_name: str | None = Form(default=None),
    ingredient_names: list[str] = Form(default=[]),
    quantities: list[str] = Form(default=[]),
    units: list[str] = Form(default=[]),
    image: UploadFile | None = File(default=None),
    session: Session = Depends(session_dependency),
) -> RecipeCreated:
    """Create a recipe for ``username``; the caller has already authenticated them."""
    image_bytes = await image.read() if image is not None else None
    recipe_id = catalog.create_recipe(
        session,
        title=title,
        prep_time=prep_time,
        cook_time=cook_time,
        difficulty=difficulty,
        instructions=instructions,
        ingredient_names=ingredient_names,
        quantities=quantities,
        units=units,
        category_name=category_name,
        username=username,
        image=image_bytes or None,
        image_filename=image.filename if image is not None else None,
    )
    return RecipeCreated(id=recipe_id)


@router.get("/recipes")
def list_recipes(
    page: int | None = None,
    size: int | None = None,
    session: Session = Depends(session_dependency),
) -> list[RecipeRead] | RecipePage:
    """Newest first. Paged when ``page`` or ``size`` is supplied, otherwise everything."""
    result = catalog.list_latest(session, page=page, size=size)
    if isinstance(result, catalog.Page):
        return page_to_read(result)
    return [recipe_to_read(r) for r in result]


@router.get("/recipes/search", response_model=RecipePage)
def search_recipes(
    q: str | None = None,
    page: int = 0,
    size: int | None = None,
    session: Session = Depends(session_dependency),
) -> RecipePage:
    return page_to_read(catalog.search(session, q, page=page, size=size))


@router.get("/recipes/{recipe_id}", response_model=RecipeRead)
def get_recipe(recipe_id: int, session: Session = Depends(session_dependency)) -> RecipeRead:
    return recipe_to_read(catalog.get_recipe(session, recipe_id))


@router.get("/categories/{name}/recipes", response_model=list[RecipeRead])
def recipes_by_category(name: str, session: Session = Depends(session_dependency)) -> list[RecipeRead]:
    return [recipe_to_read(r) for r in catalog.list_by_category(session, name)]


@router.get("/users/{username}/recipes", response_model=list[RecipeRead])
def recipes_by_owner(username: str, session: Session = Depends(session_dependency)) -> list[RecipeRead]:
    user = find_by_username(session, username)
    return [recipe_to_read(r) for r in catalog.list_by_owner(session, user)]


@router.delete("/recipes/{recipe_id}", status_code=204)
def delete_recipe(
    recipe_id: int,
    username: str,
    session: Session = Depends(session_dependency),
) -> Response:
    """Always 204: deleting someone else's or a missing recipe is a no-op."""
    user = find_by_username(session, username)
    deleted = catalog.delete_recipe(session, recipe_id, user)
    logger.info("api.recipes.delete id=%s user=%s deleted=%s", recipe_id, username, deleted)
    return Response(status_code=204)
