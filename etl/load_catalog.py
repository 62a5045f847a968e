import ast
import json
import logging
import re

import pandas as pd
from sqlalchemy import select

from recipe_catalog.database import SessionLocal, init_db
from recipe_catalog.errors import ConflictError
from recipe_catalog.models import Category, Ingredient, IngredientType, Recipe
from recipe_catalog.schemas import RecipeCreate, RecipeIngredientIn
from recipe_catalog.services.recipe_service import create_recipe
from recipe_catalog.utils.normalization import slugify

logger = logging.getLogger(__name__)


def parse_list_cell(val):
    """
    Robustly parse cells that may contain:
      - JSON arrays: ["a","b"]
      - Python repr arrays: ['a','b']
      - Comma/semicolon separated strings: a,b ; c
    Returns a list[str].
    """
    if val is None:
        return []
    if isinstance(val, list):
        return [str(x) for x in val]
    if isinstance(val, float) and pd.isna(val):
        return []

    s = str(val).strip()
    if not s:
        return []

    if s.startswith("[") and s.endswith("]"):
        try:
            arr = json.loads(s)
            if isinstance(arr, list):
                return [str(x) for x in arr]
        except json.JSONDecodeError:
            pass
        try:
            arr = ast.literal_eval(s)
            if isinstance(arr, list):
                return [str(x) for x in arr]
        except (ValueError, SyntaxError):
            pass

    parts = re.split(r"[;,]", s)
    return [p.strip() for p in parts if p.strip()]


def clean_display(text) -> str:
    t = str(text).strip()
    t = t.strip("[]\"'")
    t = re.sub(r"\s+", " ", t)
    return t


def detect_columns(df: pd.DataFrame):
    cols = {c.lower().strip(): c for c in df.columns}

    def col_like(*names):
        for n in names:
            if n in cols:
                return cols[n]
        for k, orig in cols.items():
            for n in names:
                if n in k:
                    return orig
        return None

    return dict(
        title=col_like("title", "name"),
        desc=col_like("description", "desc", "summary"),
        steps=col_like("instructions", "steps", "directions", "method"),
        img=col_like("image", "image_url", "photo"),
        categories=col_like("categories", "category", "tags"),
        main=col_like("main_ingredients", "main", "ingredients"),
        additional=col_like("additional_ingredients", "additional", "extras"),
    )


def _cell(row, col):
    if not col or pd.isna(row[col]):
        return None
    return clean_display(row[col])


def upsert_category(session, display: str, created: list):
    slug = slugify(display)
    if not slug:
        return None
    row = session.execute(select(Category).where(Category.slug == slug)).scalar_one_or_none()
    if row:
        return row
    row = Category(title=display.strip(), slug=slug)
    session.add(row)
    session.flush()
    created.append(row.id)
    return row


def upsert_ingredient(session, display: str, created: list):
    name = display.strip()
    if not name:
        return None
    row = session.execute(select(Ingredient).where(Ingredient.name == name)).scalar_one_or_none()
    if row:
        return row
    row = Ingredient(name=name, slug=slugify(name))
    session.add(row)
    session.flush()
    created.append(row.id)
    return row


def load_catalog(path: str, session_factory=SessionLocal):
    df = pd.read_csv(path) if str(path).lower().endswith(".csv") else pd.read_excel(path)
    cols = detect_columns(df)
    if not cols["title"] or not cols["steps"]:
        raise ValueError(f"{path}: a title and an instructions column are required")

    inserted = skipped = 0
    categories_created: list = []
    ingredients_created: list = []

    with session_factory() as session:
        for i, row in df.iterrows():
            title = _cell(row, cols["title"])
            instructions = _cell(row, cols["steps"])
            if not title or not instructions:
                logger.warning("Row %d skipped: missing title or instructions", i + 1)
                skipped += 1
                continue

            if session.execute(select(Recipe.id).where(Recipe.title == title)).first():
                skipped += 1
                continue

            category_ids = []
            for disp in parse_list_cell(row[cols["categories"]]) if cols["categories"] else []:
                cat = upsert_category(session, clean_display(disp), categories_created)
                if cat and cat.id not in category_ids:
                    category_ids.append(cat.id)

            # an ingredient listed as both MAIN and ADDITIONAL stays MAIN
            pairs: dict[str, IngredientType] = {}
            for col, kind in ((cols["main"], IngredientType.MAIN), (cols["additional"], IngredientType.ADDITIONAL)):
                for disp in parse_list_cell(row[col]) if col else []:
                    ing = upsert_ingredient(session, clean_display(disp), ingredients_created)
                    if ing:
                        pairs.setdefault(ing.id, kind)
            session.commit()

            dto = RecipeCreate(
                title=title,
                description=_cell(row, cols["desc"]),
                instructions=instructions,
                image=_cell(row, cols["img"]),
                category_ids=category_ids,
                ingredient_ids=[RecipeIngredientIn(ingredient_id=k, type=v) for k, v in pairs.items()],
            )
            try:
                create_recipe(session, dto)
                inserted += 1
            except ConflictError:
                skipped += 1

    return {
        "recipes_inserted": inserted,
        "recipes_skipped": skipped,
        "categories_created": len(categories_created),
        "ingredients_created": len(ingredients_created),
    }


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO)
    init_db()
    p = sys.argv[1] if len(sys.argv) > 1 else "catalog.xlsx"
    print(load_catalog(p))
