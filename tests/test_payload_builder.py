"""
Unit tests for the AttributeMapper

Tests:
- Scalar fields: names, dates, spaces, enums
- Nested objects and item lists
- Key order, passthrough and immutability
- Unmapped fields and values, missing composite mappings
- Reverse translation (unmap_tree)
"""

import copy
import pytest
from datetime import date

from ifirma_client.builder.payload_builder import (
    AttributeMapper,
    build_invoice_payload,
    iter_unmapped_fields,
    strip_unmapped_fields,
)
from ifirma_client.exceptions import MissingMappingError, ValueRuleError
from ifirma_client.mapper.mapping import FieldMap, UnmappedField, ValueMap, enum
from ifirma_client.mapper.tables import ATTRIBUTES_MAP, VALUE_MAP
from ifirma_client.transformer.registry import UNMAPPED_VALUE


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def mapper():
    """Mapper with the built-in invoice tables"""
    return AttributeMapper()


@pytest.fixture
def sample_invoice():
    """Complete invoice attribute tree"""
    return {
        "paid": 0,
        "type": "net",
        "account_no": "12 1140 2004 0000 3902 7531 4142",
        "issue_date": date(2023, 1, 5),
        "sale_date": date(2023, 1, 4),
        "sale_date_format": "daily",
        "due_date": date(2023, 1, 19),
        "payment_type": "wire",
        "designation_type": "BPO",
        "gios": False,
        "number": None,
        "customer": {
            "name": "Acme Sp. z o.o.",
            "nip": "1234567890",
            "street": "Prosta 1",
            "zipcode": "00-001",
            "city": "Warszawa",
            "email": "biuro@acme.pl",
        },
        "items": [
            {"vat_rate": 23, "quantity": 1, "price": 100.0, "name": "Widget", "unit": "szt.", "vat_type": "percent"},
            {"vat_rate": 8, "quantity": 2, "price": 10.5, "name": "Gadget", "unit": "szt.", "vat_type": "percent"},
        ],
    }


# ============================================================================
# TEST: scalar fields
# ============================================================================


class TestScalarFields:
    """Tests for scalar attribute translation"""

    def test_date_formatting(self, mapper):
        """issue_date becomes DataWystawienia in YYYY-MM-DD"""
        assert mapper.map_tree({"issue_date": date(2023, 1, 5)}) == {"DataWystawienia": "2023-01-05"}

    def test_whitespace_stripping(self, mapper):
        """account_no loses its spaces"""
        assert mapper.map_tree({"account_no": "12 34 56 78"}) == {"NumerKontaBankowego": "12345678"}

    def test_enum_substitution(self, mapper):
        """Enumerated values are substituted"""
        assert mapper.map_tree({"type": "net"}) == {"LiczOd": "NET"}
        assert mapper.map_tree({"payment_type": "on_delivery"}) == {"SposobZaplaty": "POB"}
        assert mapper.map_tree({"sale_date_format": "monthly"}) == {"FormatDatySprzedazy": "MSC"}

    def test_value_without_rule_is_unchanged(self, mapper):
        """Fields without a value rule pass their value through"""
        result = mapper.map_tree({"paid": 12.5, "gios": True, "number": None})

        assert result == {"Zaplacono": 12.5, "WidocznyNumerGios": True, "Numer": None}

    def test_unmapped_enum_value(self, mapper):
        """Unknown enum values yield the sentinel instead of raising"""
        result = mapper.map_tree({"type": "unknown_value"})

        assert result == {"LiczOd": UNMAPPED_VALUE}
        assert result["LiczOd"] is not None
        assert result["LiczOd"] != ""

    def test_unmapped_scalar_field(self, mapper):
        """Scalar keys without field mapping produce an observable placeholder key"""
        result = mapper.map_tree({"type": "net", "colour": "red"})

        assert result == {"LiczOd": "NET", UnmappedField("colour"): "red"}

    def test_several_unmapped_fields_do_not_collide(self, mapper):
        """Each unmapped key keeps its own placeholder"""
        result = mapper.map_tree({"a": 1, "b": 2})

        assert result[UnmappedField("a")] == 1
        assert result[UnmappedField("b")] == 2


# ============================================================================
# TEST: composites
# ============================================================================


class TestComposites:
    """Tests for nested objects and lists"""

    def test_nested_list(self, mapper):
        """items become Pozycje, vat_rate is rescaled"""
        result = mapper.map_tree({"items": [{"vat_rate": 23, "quantity": 1, "name": "Widget"}]})

        assert result == {"Pozycje": [{"StawkaVat": "0.23", "Ilosc": 1, "NazwaPelna": "Widget"}]}

    def test_nested_list_enum(self, mapper):
        """Nested value maps apply inside list elements"""
        result = mapper.map_tree({"items": [{"vat_type": "exempt"}, {"vat_type": "percent"}]})

        assert result == {"Pozycje": [{"TypStawkiVat": "ZW"}, {"TypStawkiVat": "PRC"}]}

    def test_empty_list(self, mapper):
        """An empty list maps to an empty list"""
        assert mapper.map_tree({"items": []}) == {"Pozycje": []}

    def test_nested_object(self, mapper):
        """customer becomes Kontrahent"""
        result = mapper.map_tree({"customer": {"name": "Acme", "nip": "123"}})

        assert result == {"Kontrahent": {"Nazwa": "Acme", "NIP": "123"}}

    def test_nested_scope_is_per_branch(self, mapper):
        """The same symbolic key maps differently at different depths"""
        result = mapper.map_tree({"customer": {"name": "Acme"}, "items": [{"name": "Widget"}]})

        assert result == {"Kontrahent": {"Nazwa": "Acme"}, "Pozycje": [{"NazwaPelna": "Widget"}]}

    def test_top_level_rules_do_not_leak_into_composites(self, mapper):
        """A top-level value rule is not applied to a nested key of the same name"""
        field_map = FieldMap(None, {"type": "Typ", "child": FieldMap("Dziecko", {"type": "Typ"})})
        value_map = ValueMap({"type": enum(a="A")})

        result = mapper.map_tree({"type": "a", "child": {"type": "a"}}, field_map, value_map)

        assert result == {"Typ": "A", "Dziecko": {"Typ": "a"}}

    def test_missing_composite_mapping(self, mapper):
        """Composite values without a nested mapping raise MissingMappingError"""
        with pytest.raises(MissingMappingError) as exc_info:
            mapper.map_tree({"type": {"foo": "bar"}})

        assert exc_info.value.key == "type"
        assert isinstance(exc_info.value, KeyError)
        assert isinstance(exc_info.value, LookupError)

    def test_missing_composite_mapping_unknown_key(self, mapper):
        """Unknown list keys raise MissingMappingError with the full path"""
        with pytest.raises(MissingMappingError) as exc_info:
            mapper.map_tree({"customer": {"addresses": [{"city": "X"}]}})

        assert exc_info.value.path == ("customer", "addresses")
        assert "customer.addresses" in str(exc_info.value)

    def test_value_rule_failure_names_path(self, mapper):
        """A failing value rule raises ValueRuleError with the field path"""
        with pytest.raises(ValueRuleError) as exc_info:
            mapper.map_tree({"items": [{"vat_rate": None}]})

        assert exc_info.value.path == ("items", "vat_rate")
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_none_account_number_passes_through(self, mapper):
        """A None account number is sent as null, not as the text None"""
        assert mapper.map_tree({"account_no": None}) == {"NumerKontaBankowego": None}

    def test_full_invoice(self, mapper, sample_invoice):
        """A complete invoice is translated field by field"""
        result = mapper.map_tree(sample_invoice)

        assert result["LiczOd"] == "NET"
        assert result["NumerKontaBankowego"] == "12114020040000390275314142"
        assert result["DataWystawienia"] == "2023-01-05"
        assert result["DataSprzedazy"] == "2023-01-04"
        assert result["TerminPlatnosci"] == "2023-01-19"
        assert result["FormatDatySprzedazy"] == "DZN"
        assert result["SposobZaplaty"] == "PRZ"
        assert result["Kontrahent"]["KodPocztowy"] == "00-001"
        assert result["Pozycje"][1] == {
            "StawkaVat": "0.08",
            "Ilosc": 2,
            "CenaJednostkowa": 10.5,
            "NazwaPelna": "Gadget",
            "Jednostka": "szt.",
            "TypStawkiVat": "PRC",
        }


# ============================================================================
# TEST: invariants
# ============================================================================


class TestInvariants:
    """Tests for ordering, purity and injection"""

    def test_output_order_follows_input(self, mapper):
        """Output keys follow the input order, not the table order"""
        result = mapper.map_tree({"due_date": date(2023, 1, 1), "customer": {"city": "X", "name": "Y"}, "paid": 1})

        assert list(result) == ["TerminPlatnosci", "Kontrahent", "Zaplacono"]
        assert list(result["Kontrahent"]) == ["Miejscowosc", "Nazwa"]

    def test_input_not_mutated(self, mapper, sample_invoice):
        """The attribute tree is left untouched"""
        before = copy.deepcopy(sample_invoice)

        mapper.map_tree(sample_invoice)

        assert sample_invoice == before

    def test_tables_are_immutable(self):
        """Mapping tables cannot be mutated"""
        with pytest.raises(TypeError):
            ATTRIBUTES_MAP.children["paid"] = "X"
        with pytest.raises(TypeError):
            VALUE_MAP.children["paid"] = str

    def test_fresh_result_per_call(self, mapper):
        """Each call returns a new tree"""
        first = mapper.map_tree({"customer": {"name": "A"}})
        second = mapper.map_tree({"customer": {"name": "A"}})

        assert first == second
        assert first is not second
        assert first["Kontrahent"] is not second["Kontrahent"]

    def test_injected_tables(self):
        """Alternative tables can be injected into the mapper"""
        mapper = AttributeMapper(
            FieldMap(None, {"kind": "Rodzaj", "lines": FieldMap("Linie", {"qty": "Ile"})}),
            ValueMap({"kind": enum(a="AAA"), "lines": ValueMap({"qty": lambda v: v * 10})}),
        )

        result = mapper.map_tree({"kind": "a", "lines": [{"qty": 2}]})

        assert result == {"Rodzaj": "AAA", "Linie": [{"Ile": 20}]}

    def test_per_call_tables_override(self, mapper):
        """Tables passed to map_tree override the mapper's tables"""
        result = mapper.map_tree({"x": 1}, FieldMap(None, {"x": "Iks"}), ValueMap())

        assert result == {"Iks": 1}

    def test_missing_value_map_branch_is_passthrough(self):
        """A composite without a nested value map passes its values through"""
        mapper = AttributeMapper(FieldMap(None, {"c": FieldMap("C", {"d": "D"})}), ValueMap())

        assert mapper.map_tree({"c": {"d": date(2023, 1, 5)}}) == {"C": {"D": date(2023, 1, 5)}}

    def test_build_invoice_payload(self):
        """Convenience function uses the invoice tables"""
        assert build_invoice_payload({"type": "gross"}) == {"LiczOd": "BRT"}

    def test_build_batch(self, mapper):
        """Several trees are mapped independently"""
        payloads = mapper.build_batch([{"type": "net"}, {"type": "gross"}])

        assert payloads == [{"LiczOd": "NET"}, {"LiczOd": "BRT"}]


# ============================================================================
# TEST: unmapped helpers
# ============================================================================


class TestUnmappedHelpers:
    """Tests for iter_unmapped_fields and strip_unmapped_fields"""

    def test_iter_unmapped_fields_nested(self, mapper):
        """Placeholders are found at every depth"""
        result = mapper.map_tree({"foo": 1, "items": [{"name": "A", "bar": 2}]})

        assert [f.symbolic_key for f in iter_unmapped_fields(result)] == ["foo", "bar"]

    def test_strip_unmapped_fields(self, mapper):
        """Placeholders are removed from a copy"""
        result = mapper.map_tree({"foo": 1, "items": [{"name": "A", "bar": 2}]})

        stripped = strip_unmapped_fields(result)

        assert stripped == {"Pozycje": [{"NazwaPelna": "A"}]}
        assert UnmappedField("foo") in result


# ============================================================================
# TEST: unmap_tree
# ============================================================================


class TestUnmapTree:
    """Tests for wire -> symbolic translation"""

    def test_unmap_scalars_and_enums(self, mapper):
        """Wire names and enum values are translated back"""
        result = mapper.unmap_tree({"LiczOd": "BRT", "SposobZaplaty": "GTK", "PelnyNumer": "FV 1/2023"})

        assert result == {"type": "gross", "payment_type": "cash", "full_number": "FV 1/2023"}

    def test_unmap_composites(self, mapper):
        """Nested objects and lists are translated with their own tables"""
        wire = {
            "Kontrahent": {"Nazwa": "Acme", "NIP": "123"},
            "Pozycje": [{"NazwaPelna": "Widget", "StawkaVat": "0.23", "TypStawkiVat": "ZW"}],
        }

        result = mapper.unmap_tree(wire)

        assert result == {
            "customer": {"name": "Acme", "nip": "123"},
            "items": [{"name": "Widget", "vat_rate": "0.23", "vat_type": "exempt"}],
        }

    def test_unknown_wire_keys_kept(self, mapper):
        """Wire keys without a mapping are kept verbatim"""
        assert mapper.unmap_tree({"Kod": 0, "Numer": 5}) == {"Kod": 0, "number": 5}
