"""
Field mapping tests
"""

from app.kreation.fields import (
    FIELD_TYPES,
    FieldType,
    cleared_fields,
    field_type,
    map_fields,
    stringify,
)

class TestFieldTable:
    """Static key to type table"""

    def test_table_has_seventeen_keys(self):
        assert len(FIELD_TYPES) == 17

    def test_typed_keys(self):
        assert field_type("menge_ml") == FieldType.INTEGER
        assert field_type("bemerkung") == FieldType.MULTI_LINE
        assert field_type("datum_erstellung") == FieldType.DATE
        for n in (1, 2, 3):
            assert field_type(f"duft_{n}_name") == FieldType.SINGLE_LINE
            assert field_type(f"duft_{n}_anteil") == FieldType.DECIMAL
            assert field_type(f"duft_{n}_gramm") == FieldType.DECIMAL
            assert field_type(f"duft_{n}_ml") == FieldType.DECIMAL

    def test_unknown_key_defaults_to_single_line(self):
        assert field_type("lieblingsfarbe") == FieldType.SINGLE_LINE

class TestMapFields:
    """map_fields behaviour"""

    def test_one_entry_per_non_null_value_in_input_order(self):
        record = {
            "name": "Rose",
            "menge_ml": 50,
            "duft_1_name": None,
            "duft_1_anteil": 12.5,
            "extra": "x",
        }

        fields = map_fields(record)

        assert [f.key for f in fields] == ["name", "menge_ml", "duft_1_anteil", "extra"]
        assert [f.value for f in fields] == ["Rose", "50", "12.5", "x"]
        assert [f.type for f in fields] == [
            FieldType.SINGLE_LINE,
            FieldType.INTEGER,
            FieldType.DECIMAL,
            FieldType.SINGLE_LINE,
        ]

    def test_empty_values_get_placeholder(self):
        fields = map_fields({"bemerkung": "", "konzentration": "   "})

        assert [f.value for f in fields] == ["keine", "keine"]

    def test_empty_values_dropped_without_placeholder(self):
        fields = map_fields({"bemerkung": "", "name": "Iris"}, placeholder=None)

        assert [f.key for f in fields] == ["name"]

    def test_empty_typed_values_never_get_placeholder(self):
        fields = map_fields({
            "name": "Rose",
            "menge_ml": "",
            "duft_1_anteil": " ",
            "datum_erstellung": "",
            "bemerkung": ""
        })

        assert [(f.key, f.value) for f in fields] == [("name", "Rose"), ("bemerkung", "keine")]

    def test_zero_is_not_empty(self):
        fields = map_fields({"duft_2_ml": 0})

        assert fields[0].value == "0"

    def test_empty_record(self):
        assert map_fields({}) == []

    def test_stringify(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"
        assert stringify(50.0) == "50"
        assert stringify(0.25) == "0.25"
        assert stringify("2024-03-01") == "2024-03-01"

    def test_rest_and_graphql_shapes(self):
        spec = map_fields({"menge_ml": 30})[0]

        assert spec.as_input() == {"key": "menge_ml", "value": "30"}
        assert spec.as_rest() == {"key": "menge_ml", "value": "30", "type": "number_integer"}

class TestClearedFields:
    """Replace semantics for updates"""

    def test_clears_every_known_key_not_submitted(self):
        submitted = map_fields({"name": "Rose", "menge_ml": 50, "extra": "x"})

        cleared = cleared_fields(submitted)

        keys = {f.key for f in cleared}
        assert keys == set(FIELD_TYPES) - {"name", "menge_ml"}
        assert all(f.value == "" for f in cleared)
