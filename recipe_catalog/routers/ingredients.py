# recipe_catalog/routers/ingredients.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from recipe_catalog.database import get_db
from recipe_catalog.routers.params import PageParams, page_params
from recipe_catalog.schemas import ApiListResponse, ApiResponse, IngredientCreate, IngredientOut, IngredientUpdate
from recipe_catalog.services import ingredient_service

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.post("", response_model=ApiResponse[IngredientOut], status_code=status.HTTP_201_CREATED)
def create_ingredient(body: IngredientCreate, db: Session = Depends(get_db)):
    ingredient = ingredient_service.create_ingredient(db, body)
    return {"message": "Ingredient created successfully", "data": ingredient}


@router.get("", response_model=ApiListResponse[IngredientOut])
def list_ingredients(params: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    result = ingredient_service.find_all_ingredients(db, params.page, params.limit)
    return {"message": "Ingredients retrieved successfully", **result}


@router.get("/{ingredient_id}", response_model=ApiResponse[IngredientOut])
def get_ingredient(ingredient_id: str, db: Session = Depends(get_db)):
    ingredient = ingredient_service.find_ingredient(db, ingredient_id)
    return {"message": "Ingredient retrieved successfully", "data": ingredient}


@router.patch("/{ingredient_id}", response_model=ApiResponse[IngredientOut])
def update_ingredient(ingredient_id: str, body: IngredientUpdate, db: Session = Depends(get_db)):
    ingredient = ingredient_service.update_ingredient(db, ingredient_id, body)
    return {"message": "Ingredient updated successfully", "data": ingredient}


@router.delete("/{ingredient_id}", response_model=ApiResponse[IngredientOut])
def delete_ingredient(ingredient_id: str, db: Session = Depends(get_db)):
    ingredient = ingredient_service.remove_ingredient(db, ingredient_id)
    return {"message": "Ingredient deleted successfully", "data": ingredient}
