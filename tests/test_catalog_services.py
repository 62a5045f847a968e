import pytest
from bson import ObjectId

from recipe_catalog.errors import ConflictError, NotFoundError
from recipe_catalog.models import Category, Ingredient
from recipe_catalog.schemas import CategoryCreate, CategoryUpdate, IngredientCreate, IngredientUpdate
from recipe_catalog.services import category_service, ingredient_service


def _category(db, title="Italian", slug="italian", **kw):
    return category_service.create_category(db, CategoryCreate(title=title, slug=slug, **kw))


def _ingredient(db, name="Tomato", **kw):
    return ingredient_service.create_ingredient(db, IngredientCreate(name=name, **kw))


def test_create_category_defaults_and_ids(db):
    cat = _category(db)
    assert len(cat.id) == 24
    assert ObjectId.is_valid(cat.id)
    assert cat.image == ""
    assert cat.created_at is not None and cat.updated_at is not None


def test_create_category_duplicate_slug_conflicts(db):
    _category(db, title="Italian", slug="italian")
    with pytest.raises(ConflictError):
        _category(db, title="Italian food", slug="italian")
    # a distinct key is fine
    _category(db, title="Persian", slug="persian")
    assert db.query(Category).count() == 2


def test_create_category_duplicate_title_is_caught_by_unique_index(db):
    _category(db, title="Italian", slug="italian")
    with pytest.raises(ConflictError):
        _category(db, title="Italian", slug="italian-2")
    # session stays usable after the rollback
    assert db.query(Category).count() == 1


def test_find_all_categories_pagination(db):
    for i in range(5):
        _category(db, title=f"Cat {i}", slug=f"cat-{i}")

    first = category_service.find_all_categories(db, page=1, limit=2)
    assert [c.slug for c in first["data"]] == ["cat-4", "cat-3"]
    meta = first["pagination"]
    assert (meta.total_count, meta.return_count, meta.page, meta.limit) == (5, 2, 1, 2)
    assert meta.has_prev_page is False
    assert meta.has_next_page is True

    last = category_service.find_all_categories(db, page=3, limit=2)
    assert [c.slug for c in last["data"]] == ["cat-0"]
    assert last["pagination"].return_count == 1
    assert last["pagination"].has_prev_page is True
    assert last["pagination"].has_next_page is False

    beyond = category_service.find_all_categories(db, page=4, limit=2)
    assert beyond["data"] == []
    assert beyond["pagination"].has_next_page is False


def test_find_category_missing(db):
    with pytest.raises(NotFoundError):
        category_service.find_category(db, str(ObjectId()))
    with pytest.raises(NotFoundError):
        category_service.find_category(db, "not-an-id")


def test_update_category_merges_only_supplied_fields(db):
    cat = _category(db, image="http://img/a.png")
    updated = category_service.update_category(db, cat.id, CategoryUpdate(title="Italian Cuisine"))
    assert updated.title == "Italian Cuisine"
    assert updated.slug == "italian"
    assert updated.image == "http://img/a.png"


def test_update_category_same_slug_does_not_conflict(db):
    cat = _category(db)
    updated = category_service.update_category(db, cat.id, CategoryUpdate(slug="italian", image="x"))
    assert updated.slug == "italian"
    assert updated.image == "x"


def test_update_category_to_taken_slug_conflicts(db):
    _category(db, title="Italian", slug="italian")
    other = _category(db, title="Persian", slug="persian")
    with pytest.raises(ConflictError):
        category_service.update_category(db, other.id, CategoryUpdate(slug="italian"))


def test_update_and_remove_missing_category(db):
    missing = str(ObjectId())
    with pytest.raises(NotFoundError):
        category_service.update_category(db, missing, CategoryUpdate(title="x"))
    with pytest.raises(NotFoundError):
        category_service.remove_category(db, missing)


def test_remove_category_returns_deleted_record(db):
    cat = _category(db)
    deleted = category_service.remove_category(db, cat.id)
    assert deleted.id == cat.id
    assert deleted.slug == "italian"
    assert db.query(Category).count() == 0


def test_find_categories_by_ids_returns_subset(db):
    a = _category(db, title="A", slug="a")
    b = _category(db, title="B", slug="b")
    found = category_service.find_categories_by_ids(db, [a.id, b.id, str(ObjectId())])
    assert {c.id for c in found} == {a.id, b.id}
    assert category_service.find_categories_by_ids(db, []) == []


def test_category_ingredients(db):
    veg = _category(db, title="Vegetables", slug="vegetables")
    _ingredient(db, "Tomato", category_id=veg.id)
    _ingredient(db, "Onion", category_id=veg.id)
    _ingredient(db, "Salt")

    result = category_service.find_category_ingredients(db, veg.id, page=1, limit=10)
    assert {i.name for i in result["data"]} == {"Tomato", "Onion"}
    assert result["pagination"].total_count == 2

    with pytest.raises(NotFoundError):
        category_service.find_category_ingredients(db, str(ObjectId()))


def test_create_ingredient_trims_name_and_derives_slug(db):
    ing = _ingredient(db, "  Green Onion ")
    assert ing.name == "Green Onion"
    assert ing.slug == "green-onion"
    assert ing.image_url == ""
    assert ing.category_id is None


def test_create_ingredient_trimmed_duplicate_conflicts(db):
    _ingredient(db, "Tomato")
    with pytest.raises(ConflictError):
        _ingredient(db, " Tomato  ")
    assert db.query(Ingredient).count() == 1


def test_update_ingredient_name_conflict_only_when_changed(db):
    tomato = _ingredient(db, "Tomato")
    _ingredient(db, "Onion")

    same = ingredient_service.update_ingredient(db, tomato.id, IngredientUpdate(name="Tomato ", image_url="t.png"))
    assert same.name == "Tomato"
    assert same.image_url == "t.png"
    assert same.slug == "tomato"

    with pytest.raises(ConflictError):
        ingredient_service.update_ingredient(db, tomato.id, IngredientUpdate(name="Onion"))


def test_remove_ingredient(db):
    ing = _ingredient(db, "Tomato")
    deleted = ingredient_service.remove_ingredient(db, ing.id)
    assert deleted.name == "Tomato"
    with pytest.raises(NotFoundError):
        ingredient_service.find_ingredient(db, ing.id)


def test_update_category_slug_race_is_caught_by_unique_index(db, monkeypatch):
    _category(db, title="Italian", slug="italian")
    other = _category(db, title="Persian", slug="persian")
    other_id = other.id

    monkeypatch.setattr(category_service, "_slug_taken", lambda *a, **kw: False)
    with pytest.raises(ConflictError):
        category_service.update_category(db, other_id, CategoryUpdate(slug="italian"))
    assert category_service.find_category(db, other_id).slug == "persian"


def test_update_category_to_taken_title_conflicts(db):
    _category(db, title="Italian", slug="italian")
    other = _category(db, title="Persian", slug="persian")
    with pytest.raises(ConflictError):
        category_service.update_category(db, other.id, CategoryUpdate(title="Italian"))


def test_update_ingredient_name_race_is_caught_by_unique_index(db, monkeypatch):
    tomato = _ingredient(db, "Tomato")
    _ingredient(db, "Onion")
    tomato_id = tomato.id

    monkeypatch.setattr(ingredient_service, "_name_taken", lambda *a, **kw: False)
    with pytest.raises(ConflictError):
        ingredient_service.update_ingredient(db, tomato_id, IngredientUpdate(name="Onion"))
    assert ingredient_service.find_ingredient(db, tomato_id).name == "Tomato"
