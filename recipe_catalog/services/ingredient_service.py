# recipe_catalog/services/ingredient_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from recipe_catalog.errors import ConflictError
from recipe_catalog.models import Ingredient
from recipe_catalog.schemas import IngredientCreate, IngredientOut, IngredientUpdate
from recipe_catalog.services.pagination import paginate
from recipe_catalog.services.store import commit, get_or_404
from recipe_catalog.utils.normalization import slugify

logger = logging.getLogger(__name__)


def _name_taken(db: Session, name: str, exclude_id: str | None = None) -> bool:
    q = select(Ingredient.id).where(Ingredient.name == name)
    if exclude_id is not None:
        q = q.where(Ingredient.id != exclude_id)
    return db.execute(q.limit(1)).first() is not None


def create_ingredient(db: Session, data: IngredientCreate) -> Ingredient:
    name = data.name
    logger.info("Creating ingredient: %s", name)

    if _name_taken(db, name):
        logger.warning("Ingredient name '%s' already exists", name)
        raise ConflictError(f"Ingredient with name '{name}' already exists")

    ingredient = Ingredient(
        name=name,
        slug=data.slug or slugify(name),
        image_url=data.image_url or "",
        category_id=data.category_id,
    )
    db.add(ingredient)
    commit(db, f"Ingredient with name '{name}' already exists")
    db.refresh(ingredient)

    logger.info("Ingredient created successfully: %s", ingredient.id)
    return ingredient


def find_all_ingredients(db: Session, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    logger.info("Fetching ingredients - Page: %d, Limit: %d", page, limit)
    stmt = select(Ingredient).order_by(Ingredient.created_at.desc(), Ingredient.id.desc())
    result = paginate(db, stmt, page, limit)
    logger.info(
        "Ingredients fetched - Total: %d, Returned: %d",
        result["pagination"].total_count, result["pagination"].return_count,
    )
    return result


def find_ingredient(db: Session, ingredient_id: str) -> Ingredient:
    return get_or_404(db, Ingredient, ingredient_id, "Ingredient")


def update_ingredient(db: Session, ingredient_id: str, data: IngredientUpdate) -> Ingredient:
    logger.info("Updating ingredient: %s", ingredient_id)
    ingredient = get_or_404(db, Ingredient, ingredient_id, "Ingredient")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    if "name" in changes:
        new_name = changes["name"]
        if new_name != ingredient.name and _name_taken(db, new_name, exclude_id=ingredient.id):
            logger.warning("Ingredient name '%s' already exists", new_name)
            raise ConflictError(f"Ingredient with name '{new_name}' already exists")

    for field, value in changes.items():
        setattr(ingredient, field, value)
    commit(db, f"Ingredient update for '{ingredient_id}' conflicts with an existing ingredient", ingredient_id)
    db.refresh(ingredient)

    logger.info("Ingredient updated successfully: %s", ingredient_id)
    return ingredient


def remove_ingredient(db: Session, ingredient_id: str) -> IngredientOut:
    # recipe_ingredients rows pointing here are left in place
    logger.info("Deleting ingredient: %s", ingredient_id)
    ingredient = get_or_404(db, Ingredient, ingredient_id, "Ingredient")
    deleted = IngredientOut.model_validate(ingredient)
    db.delete(ingredient)
    commit(db, f"Ingredient '{ingredient_id}' could not be deleted", ingredient_id)
    logger.info("Ingredient deleted successfully: %s", ingredient_id)
    return deleted


def find_ingredients_by_ids(db: Session, ids: List[str]) -> List[Ingredient]:
    if not ids:
        return []
    return list(db.execute(select(Ingredient).where(Ingredient.id.in_(ids))).scalars().all())
