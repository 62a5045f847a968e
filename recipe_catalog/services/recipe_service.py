# recipe_catalog/services/recipe_service.py
import logging
from collections import defaultdict
from typing import Any, Dict, List

from sqlalchemy import func, select
from sqlalchemy.orm import Session, load_only

from recipe_catalog.errors import BadRequestError, ConflictError, NotFoundError
from recipe_catalog.models import IngredientType, Recipe, RecipeCategory, RecipeIngredient
from recipe_catalog.schemas import (
    RecipeCreate,
    RecipeIngredientIn,
    RecipeSuggestion,
    RecipeUpdate,
    SuggestedCategory,
    SuggestedIngredient,
)
from recipe_catalog.services.category_service import find_categories_by_ids
from recipe_catalog.services.ingredient_service import find_ingredients_by_ids
from recipe_catalog.services.pagination import paginate
from recipe_catalog.services.store import commit, flush, get_or_404
from recipe_catalog.utils.normalization import parse_id_list

logger = logging.getLogger(__name__)


def _title_taken(db: Session, title: str, exclude_id: str | None = None) -> bool:
    q = select(Recipe.id).where(Recipe.title == title)
    if exclude_id is not None:
        q = q.where(Recipe.id != exclude_id)
    return db.execute(q.limit(1)).first() is not None


def _check_categories(db: Session, category_ids: List[str]) -> None:
    found = find_categories_by_ids(db, category_ids)
    if len(found) != len(category_ids):
        logger.warning("One or more categories not found: %s", category_ids)
        raise NotFoundError("One or more categories not found")


def _check_ingredients(db: Session, pairs: List[RecipeIngredientIn]) -> None:
    ids = [p.ingredient_id for p in pairs]
    found = find_ingredients_by_ids(db, ids)
    if len(found) != len(ids):
        logger.warning("One or more ingredients not found: %s", ids)
        raise NotFoundError("One or more ingredients not found")


def create_recipe(db: Session, data: RecipeCreate) -> Recipe:
    title = data.title
    logger.info("Creating recipe: %s", title)

    if _title_taken(db, title):
        logger.warning("Recipe title '%s' already exists", title)
        raise ConflictError(f"Recipe with title '{title}' already exists")

    _check_categories(db, data.category_ids)
    _check_ingredients(db, data.ingredient_ids)

    # recipe + both join-row sets go out in one commit
    recipe = Recipe(
        title=title,
        description=data.description or "",
        instructions=data.instructions,
        image=data.image or "",
        category_ids=list(data.category_ids),
        ingredients=[RecipeIngredient(ingredient_id=p.ingredient_id, type=p.type) for p in data.ingredient_ids],
        categories=[RecipeCategory(category_id=cid) for cid in data.category_ids],
    )
    db.add(recipe)
    commit(db, f"Recipe with title '{title}' already exists")
    db.refresh(recipe)

    logger.info("Recipe created successfully: %s", recipe.id)
    return recipe


def find_all_recipes(db: Session, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    logger.info("Fetching recipes - Page: %d, Limit: %d", page, limit)
    stmt = (
        select(Recipe)
        .options(load_only(Recipe.id, Recipe.title, Recipe.description, Recipe.image, Recipe.created_at, Recipe.updated_at))
        .order_by(Recipe.created_at.desc(), Recipe.id.desc())
    )
    result = paginate(db, stmt, page, limit)
    logger.info(
        "Recipes fetched - Total: %d, Returned: %d",
        result["pagination"].total_count, result["pagination"].return_count,
    )
    return result


def find_recipe(db: Session, recipe_id: str) -> Recipe:
    logger.info("Fetching recipe: %s", recipe_id)
    return get_or_404(db, Recipe, recipe_id, "Recipe")


def update_recipe(db: Session, recipe_id: str, data: RecipeUpdate) -> Recipe:
    logger.info("Updating recipe: %s", recipe_id)
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")

    title = data.title
    if title is not None and title != recipe.title and _title_taken(db, title, exclude_id=recipe.id):
        logger.warning("Recipe title '%s' already exists", title)
        raise ConflictError(f"Recipe with title '{title}' already exists")

    if data.category_ids is not None:
        _check_categories(db, data.category_ids)
    if data.ingredient_ids is not None:
        _check_ingredients(db, data.ingredient_ids)

    if title is not None:
        recipe.title = title
    for field in ("description", "instructions", "image"):
        value = getattr(data, field)
        if value is not None:
            setattr(recipe, field, value)
    conflict = f"Recipe with title '{recipe.title}' already exists"

    # old rows must be gone before the new ones hit the (recipe, target) unique index
    if data.category_ids is not None:
        recipe.category_ids = list(data.category_ids)
        recipe.categories.clear()
    if data.ingredient_ids is not None:
        recipe.ingredients.clear()
    flush(db, conflict, recipe_id)

    if data.category_ids is not None:
        recipe.categories.extend(RecipeCategory(category_id=cid) for cid in data.category_ids)
    if data.ingredient_ids is not None:
        recipe.ingredients.extend(
            RecipeIngredient(ingredient_id=p.ingredient_id, type=p.type) for p in data.ingredient_ids
        )
    commit(db, conflict, recipe_id)
    db.refresh(recipe)

    logger.info("Recipe updated successfully: %s", recipe_id)
    return recipe


def remove_recipe(db: Session, recipe_id: str) -> None:
    logger.info("Deleting recipe: %s", recipe_id)
    recipe = get_or_404(db, Recipe, recipe_id, "Recipe")
    db.delete(recipe)
    commit(db, f"Recipe '{recipe_id}' could not be deleted", recipe_id)
    logger.info("Recipe deleted successfully: %s", recipe_id)


def get_recipe_suggestions(db: Session, ingredients: str | None) -> List[RecipeSuggestion]:
    """
    Rank recipes by how many of their MAIN ingredients appear in the comma
    separated `ingredients` id list. Recipes without any hit are dropped;
    equal scores fall back to recipe id order.
    """
    requested = parse_id_list(ingredients)
    if not requested:
        logger.warning("Suggestion request without ingredients: %r", ingredients)
        raise BadRequestError("No ingredients provided")

    logger.info("Getting recipe suggestions for ingredients: %s", ", ".join(requested))

    # MAIN hits per recipe
    sub_hits = (
        select(
            RecipeIngredient.recipe_id,
            func.count(func.distinct(RecipeIngredient.ingredient_id)).label("match_count"),
        )
        .where(RecipeIngredient.type == IngredientType.MAIN)
        .where(RecipeIngredient.ingredient_id.in_(requested))
        .group_by(RecipeIngredient.recipe_id)
        .subquery()
    )

    rows = db.execute(
        select(Recipe, sub_hits.c.match_count)
        .join(sub_hits, Recipe.id == sub_hits.c.recipe_id)
        .where(sub_hits.c.match_count > 0)
        .order_by(sub_hits.c.match_count.desc(), Recipe.id.asc())
    ).all()
    if not rows:
        return []

    recipe_ids = [recipe.id for recipe, _ in rows]
    main_ids: Dict[str, List[str]] = defaultdict(list)
    for rid, iid in db.execute(
        select(RecipeIngredient.recipe_id, RecipeIngredient.ingredient_id)
        .where(RecipeIngredient.recipe_id.in_(recipe_ids))
        .where(RecipeIngredient.type == IngredientType.MAIN)
        .order_by(RecipeIngredient.id)
    ).all():
        main_ids[rid].append(iid)

    # unresolvable references simply drop out of the display data
    ingredients_by_id = {
        i.id: i for i in find_ingredients_by_ids(db, sorted({iid for ids in main_ids.values() for iid in ids}))
    }
    categories_by_id = {
        c.id: c for c in find_categories_by_ids(db, sorted({cid for recipe, _ in rows for cid in recipe.category_ids or []}))
    }

    out: List[RecipeSuggestion] = []
    for recipe, match_count in rows:
        out.append(RecipeSuggestion(
            id=recipe.id,
            title=recipe.title,
            description=recipe.description,
            image=recipe.image,
            instructions=recipe.instructions,
            match_count=int(match_count),
            main_ingredients_data=[
                SuggestedIngredient(id=i.id, name=i.name, slug=i.slug, image=i.image_url)
                for i in (ingredients_by_id.get(iid) for iid in main_ids[recipe.id]) if i is not None
            ],
            categories_data=[
                SuggestedCategory(id=c.id, title=c.title, slug=c.slug, image=c.image)
                for c in (categories_by_id.get(cid) for cid in recipe.category_ids or []) if c is not None
            ],
        ))
    logger.info("Recipe suggestions computed: %d match(es)", len(out))
    return out
