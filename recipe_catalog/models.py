# recipe_catalog/models.py
import enum
from datetime import datetime, timezone

from bson import ObjectId
from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def new_id() -> str:
    return str(ObjectId())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase): ...


class IngredientType(str, enum.Enum):
    MAIN = "MAIN"
    ADDITIONAL = "ADDITIONAL"


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Category(TimestampMixin, Base):
    __tablename__ = "categories"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(200), unique=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    image: Mapped[str] = mapped_column(String(500), default="")


class Ingredient(TimestampMixin, Base):
    __tablename__ = "ingredients"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    slug: Mapped[str] = mapped_column(String(200), index=True)
    image_url: Mapped[str] = mapped_column(String(500), default="")
    # no FK: categories are deleted without touching their ingredients
    category_id: Mapped[str | None] = mapped_column(String(24), index=True)


class Recipe(TimestampMixin, Base):
    __tablename__ = "recipes"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(300), unique=True, index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    instructions: Mapped[str] = mapped_column(Text)
    image: Mapped[str] = mapped_column(String(500), default="")
    category_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        back_populates="recipe", cascade="all, delete-orphan", order_by="RecipeIngredient.id"
    )
    categories: Mapped[list["RecipeCategory"]] = relationship(
        back_populates="recipe", cascade="all, delete-orphan", order_by="RecipeCategory.id"
    )


class RecipeIngredient(Base):
    __tablename__ = "recipe_ingredients"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    recipe_id: Mapped[str] = mapped_column(ForeignKey("recipes.id", ondelete="CASCADE"))
    ingredient_id: Mapped[str] = mapped_column(String(24))
    type: Mapped[IngredientType] = mapped_column(Enum(IngredientType, native_enum=False, length=20))
    recipe: Mapped["Recipe"] = relationship(back_populates="ingredients")
    __table_args__ = (
        UniqueConstraint("recipe_id", "ingredient_id", name="uq_recipe_ingredient"),
        Index("ix_recipe_ingredient_type_ing", "type", "ingredient_id"),
    )


class RecipeCategory(Base):
    __tablename__ = "recipe_categories"
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_id)
    recipe_id: Mapped[str] = mapped_column(ForeignKey("recipes.id", ondelete="CASCADE"), index=True)
    category_id: Mapped[str] = mapped_column(String(24), index=True)
    recipe: Mapped["Recipe"] = relationship(back_populates="categories")
    __table_args__ = (UniqueConstraint("recipe_id", "category_id", name="uq_recipe_category"),)
