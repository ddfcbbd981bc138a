"""Tests for table shapes, the Database enumerator and the memory catalog."""

import json

import pytest

from tabcmp import (
    CatalogError,
    Column,
    Database,
    Index,
    MemoryCatalog,
    SortedMap,
    save_snapshot,
    snapshot,
)


class CountingCatalog(MemoryCatalog):
    """MemoryCatalog that records how often metadata is loaded."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = []

    def load_columns(self, table_name):
        self.calls.append(("columns", table_name))
        return super().load_columns(table_name)

    def load_indices(self, table_name):
        self.calls.append(("indices", table_name))
        return super().load_indices(table_name)


def test_lists_table_names(db):
    assert set(db.table_names) == {
        "test_table_1",
        "test_table_2",
        "test_table_3",
        "test_table_4",
        "posts",
    }
    assert len(db.tables) == 5


def test_unknown_table_is_none(db):
    assert db.table("nope") is None


def test_table_lookup_with_several_names(db):
    first, missing, second = db.table("test_table_1", "nope", "test_table_2")
    assert first.name == "test_table_1"
    assert missing is None
    assert second.name == "test_table_2"


def test_table_lookup_is_memoized(db):
    assert db.table("test_table_1") is db.table("test_table_1")


def test_has_fields(db):
    fields = db.table("test_table_1").fields
    assert fields["id"].db_type == "integer"
    assert fields["id"].primary_key is True
    assert fields["id"].allow_null is False
    assert fields["body"].allow_null is True
    assert fields["title"] == Column(db_type="character varying(255)")


def test_has_indices(db):
    indices = db.table("test_table_1").indices
    index = indices["test_table_1_title_index"]
    assert index.unique is False
    assert index.columns == ("title",)
    assert index.key == ("title",)
    assert index.name == "test_table_1_title_index"


def test_indices_by_columns(db):
    by_columns = db.table("posts").indices_by_columns
    assert set(by_columns) == {("title",), ("pid",)}
    assert by_columns[("pid",)].unique is True


def test_indices_on_same_columns_keep_last_definition():
    catalog = MemoryCatalog(
        {
            "t": {
                "columns": {"a": {"db_type": "integer"}},
                "indices": {
                    "t_a_idx": {"columns": ["a"], "unique": False},
                    "t_a_key": {"columns": ["a"], "unique": True},
                },
            }
        }
    )
    table = Database(catalog).table("t")
    assert table.indices_by_columns[("a",)] == Index(("a",), unique=True, name="t_a_key")


def test_metadata_is_loaded_once():
    catalog = CountingCatalog({"t": {"columns": {"a": {"db_type": "integer"}}}})
    table = Database(catalog).table("t")
    table.fields
    table.fields
    table.indices_by_columns
    table.indices
    assert catalog.calls == [("columns", "t"), ("indices", "t")]


def test_table_mappings_are_read_only(db):
    table = db.table("test_table_1")
    with pytest.raises(TypeError):
        table.fields["extra"] = Column(db_type="text")
    with pytest.raises(TypeError):
        table.indices_by_columns[("x",)] = Index(("x",))
    with pytest.raises(AttributeError):
        table.name = "renamed"


def test_missing_attributes_are_not_specified():
    catalog = MemoryCatalog({"t": {"columns": {"a": {"db_type": "text"}}}})
    col = Database(catalog).table("t").fields["a"]
    assert col == Column(db_type="text", primary_key=False, default=None, allow_null=True)
    assert col.charset is None
    assert col.collation is None


def test_engine_absent_without_support(db):
    assert db.table("test_table_1").engine is None
    assert "engine" not in db.table("test_table_1").to_map()


def test_knows_about_engines(mysql_like_catalog):
    assert Database(mysql_like_catalog).table("test_table_5").engine == "InnoDB"


def test_knows_about_charsets_and_collations(mysql_like_catalog):
    fields = Database(mysql_like_catalog).table("test_table_5").fields
    assert fields["body"].charset == "utf8"
    assert fields["body"].collation == "utf8_general_ci"
    assert fields["id"].charset is None


def test_to_map(mysql_like_catalog):
    result = Database(mysql_like_catalog).table("test_table_5").to_map()
    assert isinstance(result, SortedMap)
    assert list(result) == ["engine", "fields", "indices"]
    assert result["engine"] == "InnoDB"
    assert result["fields"]["body"] == {
        "db_type": "text",
        "primary_key": False,
        "default": None,
        "allow_null": True,
        "charset": "utf8",
        "collation": "utf8_general_ci",
    }
    assert result["indices"] == {}


def test_to_map_keys_indices_by_columns(db):
    indices = db.table("posts").to_map()["indices"]
    assert indices == {
        ("pid",): {"columns": ("pid",), "unique": True},
        ("title",): {"columns": ("title",), "unique": False},
    }


def test_matches(db):
    table = db.table("test_table_1")
    assert table.matches(fields={"title": True, "legacy": False})
    assert not table.matches(fields={"legacy": True})
    assert not table.matches(fields={"title": False})
    assert table.matches(indices={("title",): True, ("body",): False})
    assert not table.matches(indices={("body",): True})
    assert table.matches()


def test_malformed_memory_catalog():
    with pytest.raises(CatalogError):
        MemoryCatalog({"t": ["not", "a", "mapping"]})
    with pytest.raises(CatalogError):
        MemoryCatalog({"t": {"columns": {}, "indices": {"i": {"unique": True}}}})
    with pytest.raises(CatalogError):
        MemoryCatalog.from_dict({"no_tables": {}})


def test_snapshot_round_trip(tmp_path, mysql_like_catalog):
    """A saved snapshot loads back into an equivalent catalog."""
    path = tmp_path / "snapshot.json"
    save_snapshot(mysql_like_catalog, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["supports_engines"] is True
    assert data["tables"]["test_table_5"]["engine"] == "InnoDB"

    loaded = Database(MemoryCatalog.load(path)).table("test_table_5")
    original = Database(mysql_like_catalog).table("test_table_5")
    assert loaded.to_map() == original.to_map()
    assert not loaded.diff(original).has_differences()


def test_snapshot_leaves_out_unsupported_attributes(catalog):
    data = snapshot(catalog)
    assert data["supports_charsets"] is False
    table = data["tables"]["posts"]
    assert "engine" not in table
    assert set(table["columns"]["pid"]) == {"db_type", "primary_key", "default", "allow_null"}
    assert table["indices"]["posts_pid_index"] == {"columns": ["pid"], "unique": True}


def test_load_missing_snapshot(tmp_path):
    with pytest.raises(CatalogError):
        MemoryCatalog.load(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError):
        MemoryCatalog.load(path)
