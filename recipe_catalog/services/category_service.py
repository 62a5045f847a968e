# recipe_catalog/services/category_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.orm import Session

from recipe_catalog.errors import ConflictError
from recipe_catalog.models import Category, Ingredient
from recipe_catalog.schemas import CategoryCreate, CategoryOut, CategoryUpdate
from recipe_catalog.services.pagination import paginate
from recipe_catalog.services.store import commit, get_or_404

logger = logging.getLogger(__name__)


def _slug_taken(db: Session, slug: str, exclude_id: str | None = None) -> bool:
    q = select(Category.id).where(Category.slug == slug)
    if exclude_id is not None:
        q = q.where(Category.id != exclude_id)
    return db.execute(q.limit(1)).first() is not None


def create_category(db: Session, data: CategoryCreate) -> Category:
    logger.info("Creating category: %s", data.slug)

    if _slug_taken(db, data.slug):
        logger.warning("Category slug '%s' already exists", data.slug)
        raise ConflictError(f"Category with slug '{data.slug}' already exists")

    category = Category(title=data.title, slug=data.slug, image=data.image or "")
    db.add(category)
    commit(db, f"Category with slug '{data.slug}' or title '{data.title}' already exists")
    db.refresh(category)

    logger.info("Category created successfully: %s", category.id)
    return category


def find_all_categories(db: Session, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    logger.info("Fetching categories - Page: %d, Limit: %d", page, limit)
    stmt = select(Category).order_by(Category.created_at.desc(), Category.id.desc())
    result = paginate(db, stmt, page, limit)
    logger.info(
        "Categories fetched - Total: %d, Returned: %d",
        result["pagination"].total_count, result["pagination"].return_count,
    )
    return result


def find_category(db: Session, category_id: str) -> Category:
    return get_or_404(db, Category, category_id, "Category")


def update_category(db: Session, category_id: str, data: CategoryUpdate) -> Category:
    logger.info("Updating category: %s", category_id)
    category = get_or_404(db, Category, category_id, "Category")
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_slug = changes.get("slug")
    if new_slug and new_slug != category.slug and _slug_taken(db, new_slug, exclude_id=category.id):
        logger.warning("Category slug '%s' already exists", new_slug)
        raise ConflictError(f"Category with slug '{new_slug}' already exists")

    for field, value in changes.items():
        setattr(category, field, value)
    commit(db, f"Category update for '{category_id}' conflicts with an existing category", category_id)
    db.refresh(category)

    logger.info("Category updated successfully: %s", category_id)
    return category


def remove_category(db: Session, category_id: str) -> CategoryOut:
    # recipes and ingredients keep their (now dangling) references
    logger.info("Deleting category: %s", category_id)
    category = get_or_404(db, Category, category_id, "Category")
    deleted = CategoryOut.model_validate(category)
    db.delete(category)
    commit(db, f"Category '{category_id}' could not be deleted", category_id)
    logger.info("Category deleted successfully: %s", category_id)
    return deleted


def find_categories_by_ids(db: Session, ids: List[str]) -> List[Category]:
    if not ids:
        return []
    return list(db.execute(select(Category).where(Category.id.in_(ids))).scalars().all())


def find_category_ingredients(db: Session, category_id: str, page: int = 1, limit: int = 10) -> Dict[str, Any]:
    logger.info("Getting ingredients of category %s - Page: %d, Limit: %d", category_id, page, limit)
    get_or_404(db, Category, category_id, "Category")
    stmt = (
        select(Ingredient)
        .where(Ingredient.category_id == category_id)
        .order_by(Ingredient.created_at.desc(), Ingredient.id.desc())
    )
    return paginate(db, stmt, page, limit)
