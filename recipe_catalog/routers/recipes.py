# recipe_catalog/routers/recipes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from recipe_catalog.database import get_db
from recipe_catalog.routers.params import PageParams, page_params
from recipe_catalog.schemas import Page, RecipeCreate, RecipeOut, RecipeSuggestion, RecipeSummary, RecipeUpdate
from recipe_catalog.services import recipe_service

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
def create_recipe(body: RecipeCreate, db: Session = Depends(get_db)):
    return recipe_service.create_recipe(db, body)


@router.get("", response_model=Page[RecipeSummary])
def list_recipes(params: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    return recipe_service.find_all_recipes(db, params.page, params.limit)


# declared before /{recipe_id} so "suggestions" is not taken for an id
@router.get("/suggestions", response_model=List[RecipeSuggestion])
def recipe_suggestions(
    ingredients: Optional[str] = Query(None, description="Comma separated ingredient ids"),
    db: Session = Depends(get_db),
):
    return recipe_service.get_recipe_suggestions(db, ingredients)


@router.get("/{recipe_id}", response_model=RecipeOut)
def get_recipe(recipe_id: str, db: Session = Depends(get_db)):
    return recipe_service.find_recipe(db, recipe_id)


@router.patch("/{recipe_id}", response_model=RecipeOut)
def update_recipe(recipe_id: str, body: RecipeUpdate, db: Session = Depends(get_db)):
    return recipe_service.update_recipe(db, recipe_id, body)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_recipe(recipe_id: str, db: Session = Depends(get_db)):
    recipe_service.remove_recipe(db, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
