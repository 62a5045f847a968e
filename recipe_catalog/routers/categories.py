# recipe_catalog/routers/categories.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from recipe_catalog.database import get_db
from recipe_catalog.routers.params import PageParams, page_params
from recipe_catalog.schemas import (
    ApiListResponse,
    ApiResponse,
    CategoryCreate,
    CategoryOut,
    CategoryUpdate,
    IngredientOut,
)
from recipe_catalog.services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", response_model=ApiResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
def create_category(body: CategoryCreate, db: Session = Depends(get_db)):
    category = category_service.create_category(db, body)
    return {"message": "Category created successfully", "data": category}


@router.get("", response_model=ApiListResponse[CategoryOut])
def list_categories(params: PageParams = Depends(page_params), db: Session = Depends(get_db)):
    result = category_service.find_all_categories(db, params.page, params.limit)
    return {"message": "Categories retrieved successfully", **result}


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = category_service.find_category(db, category_id)
    return {"message": "Category retrieved successfully", "data": category}


@router.get("/{category_id}/ingredients", response_model=ApiListResponse[IngredientOut])
def list_category_ingredients(
    category_id: str, params: PageParams = Depends(page_params), db: Session = Depends(get_db)
):
    result = category_service.find_category_ingredients(db, category_id, params.page, params.limit)
    return {"message": "Category ingredients retrieved successfully", **result}


@router.patch("/{category_id}", response_model=ApiResponse[CategoryOut])
def update_category(category_id: str, body: CategoryUpdate, db: Session = Depends(get_db)):
    category = category_service.update_category(db, category_id, body)
    return {"message": "Category updated successfully", "data": category}


@router.delete("/{category_id}", response_model=ApiResponse[CategoryOut])
def delete_category(category_id: str, db: Session = Depends(get_db)):
    category = category_service.remove_category(db, category_id)
    return {"message": "Category deleted successfully", "data": category}
