from recipe_catalog.utils.normalization import normalize_token, parse_id_list, slugify


def test_normalize_token():
    assert normalize_token("  Green   Onion! ") == "green onion"
    assert normalize_token("") == ""


def test_slugify():
    assert slugify("Italian Cuisine") == "italian-cuisine"
    assert slugify("  Crème -- fraîche ") == "crme-frache"
    assert slugify("!!!") == ""


def test_parse_id_list():
    assert parse_id_list("a, b ,,c") == ["a", "b", "c"]
    assert parse_id_list("a,a,b,a") == ["a", "b"]
    assert parse_id_list(" , ") == []
    assert parse_id_list(None) == []
