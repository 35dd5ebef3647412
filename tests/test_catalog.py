import json

import pytest

from gambiteditor.catalog import ActionCatalog, clear_catalog_cache, load_action_catalog


@pytest.fixture(autouse=True)
def _fresh_cache():
    clear_catalog_cache()
    yield
    clear_catalog_cache()


def test_resolve_accepts_int_and_text_ids():
    catalog = ActionCatalog({"12": "Aero", 13: "Stone"})
    assert catalog.resolve(12) == "Aero"
    assert catalog.resolve("13") == "Stone"
    assert catalog.resolve(" 12 ") == "Aero"


def test_resolve_never_raises():
    catalog = ActionCatalog({12: "Aero"})
    assert catalog.resolve(99) == "Unknown"
    assert catalog.resolve("abc") == "Unknown"
    assert catalog.resolve(None) == "Unknown"
    assert ActionCatalog().resolve(12) == "Unknown"


def test_unusable_entries_are_skipped():
    catalog = ActionCatalog({"x": "Bad id", 5: "   ", 6: None, 7: "Attack"})
    assert len(catalog) == 1
    assert 7 in catalog
    assert 5 not in catalog


def test_from_rows_ignores_short_rows():
    catalog = ActionCatalog.from_rows([(1, "Fire"), ("2", "Blizzard"), (3,), ()])
    assert catalog.items() == [(1, "Fire"), (2, "Blizzard")]


def test_from_mapping_accepts_nested_and_flat():
    nested = ActionCatalog.from_mapping({"id_to_name": {"4": "Cure"}})
    flat = ActionCatalog.from_mapping({"4": "Cure"})
    assert nested.resolve(4) == flat.resolve(4) == "Cure"


def test_id_for_normalizes_name(catalog):
    assert catalog.id_for("  rock   THROW ") == 113
    assert catalog.id_for("Meteor") is None


def test_search_by_id_or_name(catalog):
    assert catalog.search("ston") == [(13, "Stone"), (498, "Stone Punch")]
    assert catalog.search("11") == [(113, "Rock Throw")]
    assert len(catalog.search("")) == len(catalog)


def test_suggest_finds_misspelt_names(catalog):
    assert catalog.suggest("Stone")[0] == (13, "Stone")
    assert (12, "Aero") in catalog.suggest("Aeor")


def test_load_action_catalog_reads_and_caches(tmp_path):
    path = tmp_path / "actions.json"
    path.write_text(json.dumps({"id_to_name": {"12": "Aero"}}), encoding="utf-8")

    first = load_action_catalog(str(path))
    assert first.resolve(12) == "Aero"

    path.write_text(json.dumps({"id_to_name": {"12": "Aeroga"}}), encoding="utf-8")
    assert load_action_catalog(str(path)) is first

    clear_catalog_cache()
    assert load_action_catalog(str(path)).resolve(12) == "Aeroga"


def test_load_action_catalog_missing_file_is_empty(tmp_path):
    catalog = load_action_catalog(str(tmp_path / "missing.json"))
    assert len(catalog) == 0
    assert catalog.resolve(1) == "Unknown"


def test_load_action_catalog_rejects_non_object(tmp_path):
    path = tmp_path / "actions.json"
    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_action_catalog(str(path))
