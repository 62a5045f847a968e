# recipe_catalog/schemas.py
from datetime import datetime
from typing import Annotated, Generic, List, Optional, TypeVar

from bson import ObjectId
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel

from recipe_catalog.models import IngredientType

T = TypeVar("T")


def _check_object_id(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError(f"'{value}' is not a valid id")
    return value


ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]
NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
# unique display keys are stored trimmed
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------- Categories ----------

class CategoryCreate(CamelModel):
    title: TrimmedStr = Field(json_schema_extra={"example": "Italian Cuisine"})
    slug: NonEmptyStr = Field(json_schema_extra={"example": "italian-cuisine"})
    image: Optional[str] = None


class CategoryUpdate(CamelModel):
    title: Optional[TrimmedStr] = None
    slug: Optional[NonEmptyStr] = None
    image: Optional[str] = None


class CategoryOut(CamelModel):
    id: str
    title: str
    slug: str
    image: str
    created_at: datetime
    updated_at: datetime


# ---------- Ingredients ----------

class IngredientCreate(CamelModel):
    name: TrimmedStr = Field(json_schema_extra={"example": "Tomato"})
    slug: Optional[NonEmptyStr] = None
    image_url: Optional[str] = None
    category_id: Optional[ObjectIdStr] = None


class IngredientUpdate(CamelModel):
    name: Optional[TrimmedStr] = None
    slug: Optional[NonEmptyStr] = None
    image_url: Optional[str] = None
    category_id: Optional[ObjectIdStr] = None


class IngredientOut(CamelModel):
    id: str
    name: str
    slug: str
    image_url: str
    category_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ---------- Recipes ----------

class RecipeIngredientIn(CamelModel):
    ingredient_id: ObjectIdStr
    type: IngredientType


class RecipeCreate(CamelModel):
    title: TrimmedStr = Field(json_schema_extra={"example": "Ghormeh Sabzi"})
    description: Optional[str] = None
    instructions: NonEmptyStr
    image: Optional[str] = None
    category_ids: List[ObjectIdStr]
    ingredient_ids: List[RecipeIngredientIn]


class RecipeUpdate(CamelModel):
    title: Optional[TrimmedStr] = None
    description: Optional[str] = None
    instructions: Optional[NonEmptyStr] = None
    image: Optional[str] = None
    category_ids: Optional[List[ObjectIdStr]] = None
    ingredient_ids: Optional[List[RecipeIngredientIn]] = None


class RecipeCategoryOut(CamelModel):
    id: str
    recipe_id: str
    category_id: str


class RecipeIngredientOut(CamelModel):
    id: str
    recipe_id: str
    ingredient_id: str
    type: IngredientType


class RecipeSummary(CamelModel):
    id: str
    title: str
    description: str
    image: str
    created_at: datetime
    updated_at: datetime


class RecipeOut(RecipeSummary):
    instructions: str
    category_ids: List[str]
    categories: List[RecipeCategoryOut] = []
    ingredients: List[RecipeIngredientOut] = []


class SuggestedIngredient(CamelModel):
    id: str
    name: str
    slug: str
    image: str


class SuggestedCategory(CamelModel):
    id: str
    title: str
    slug: str
    image: str


class RecipeSuggestion(CamelModel):
    id: str
    title: str
    description: str
    image: str
    instructions: str
    match_count: int
    main_ingredients_data: List[SuggestedIngredient]
    categories_data: List[SuggestedCategory]


# ---------- Envelopes ----------

class PaginationMeta(CamelModel):
    total_count: int
    return_count: int
    page: int
    limit: int
    has_prev_page: bool
    has_next_page: bool


class Page(CamelModel, Generic[T]):
    data: List[T]
    pagination: PaginationMeta


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    message: str
    data: T


class ApiListResponse(Page[T], Generic[T]):
    success: bool = True
    message: str


class UploadedFile(CamelModel):
    original_name: str
    file_name: str
    size: int
    mimetype: str
    public_url: str
