"""Tests for product color resolution across join rows and the legacy inline array."""

from sqlalchemy.exc import OperationalError

from schemas.color import ColorDescriptor, ColorInput
from services.color import (
    ColorSource,
    StandardColorIndex,
    classify_color_entry,
    normalize_colors,
    replace_product_colors,
    resolve_product_colors,
)
from models.color import ProductColor


class FailingSession:
    """Session stand-in whose queries always fail."""

    def __init__(self):
        self.rolled_back = False

    def query(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    def rollback(self):
        self.rolled_back = True


class TestClassifyColorEntry:

    def test_hex_string_is_legacy_hex(self):
        assert classify_color_entry("#A1b2C3").source == ColorSource.LEGACY_HEX_STRING

    def test_short_or_named_strings_are_unrecognized(self):
        assert classify_color_entry("#FFF").source == ColorSource.UNRECOGNIZED
        assert classify_color_entry("red").source == ColorSource.UNRECOGNIZED

    def test_dict_with_hex_code_is_legacy_object(self):
        entry = classify_color_entry({"name": "Sky", "hex_code": "#87CEEB"})
        assert entry.source == ColorSource.LEGACY_OBJECT

    def test_dict_without_hex_code_is_unrecognized(self):
        assert classify_color_entry({"name": "Sky"}).source == ColorSource.UNRECOGNIZED

    def test_other_types_are_unrecognized(self):
        assert classify_color_entry(42).source == ColorSource.UNRECOGNIZED
        assert classify_color_entry(None).source == ColorSource.UNRECOGNIZED

    def test_join_rows_by_source(self):
        assert classify_color_entry(ProductColor(color_id="c1")).source == ColorSource.STANDARD_REF
        assert classify_color_entry(ProductColor(custom_hex_code="#123456")).source == ColorSource.CUSTOM_HEX


class TestLegacyColors:

    def test_hex_matches_standard_color_case_insensitively(self, db_session, standard_colors, make_product):
        red = standard_colors["Red"]
        product = make_product(colors=["#ff0000"])

        colors = resolve_product_colors(db_session, product.id)

        assert len(colors) == 1
        assert colors[0].id == red.id
        assert colors[0].name == "Red"
        assert colors[0].hex_code == "#FF0000"
        assert colors[0].custom is False

    def test_unmatched_hex_becomes_custom(self, db_session, standard_colors, make_product):
        product = make_product(colors=["#123456"])

        colors = resolve_product_colors(db_session, product.id)

        assert [c.model_dump() for c in colors] == [
            {"id": "color-#123456", "name": "Custom", "hex_code": "#123456", "custom": True}
        ]

    def test_legacy_object_defaults(self, db_session, make_product):
        product = make_product(colors=[
            {"id": "sky", "name": "Sky", "hex_code": "#87CEEB", "custom": True},
            {"hex_code": "#222222"},
            {"hex_code": None, "name": "Blank"},
        ])

        colors = resolve_product_colors(db_session, product.id)

        assert colors[0].model_dump() == {"id": "sky", "name": "Sky", "hex_code": "#87CEEB", "custom": True}
        assert colors[1].model_dump() == {
            "id": "color-#222222", "name": "Unknown", "hex_code": "#222222", "custom": False
        }
        assert colors[2].hex_code == "#000000"
        assert colors[2].name == "Blank"

    def test_unrecognized_entries_are_skipped(self, db_session, standard_colors, make_product):
        product = make_product(colors=["red", 7, {"name": "nohex"}, "#00FF00"])

        colors = resolve_product_colors(db_session, product.id)

        assert [c.hex_code for c in colors] == ["#00FF00"]

    def test_duplicate_ids_keep_first_occurrence(self, db_session, standard_colors, make_product):
        product = make_product(colors=["#FF0000", "#ff0000", "#0000FF"])

        colors = resolve_product_colors(db_session, product.id)

        assert [c.name for c in colors] == ["Red", "Blue"]

    def test_non_string_legacy_fields_are_coerced(self, db_session, make_product):
        product = make_product(colors=[
            {"id": 12, "hex_code": "#FF0000", "name": 5},
            "#00FF00",
        ])

        colors = resolve_product_colors(db_session, product.id)

        assert colors[0].model_dump() == {"id": "12", "name": "5", "hex_code": "#FF0000", "custom": False}
        assert colors[1].hex_code == "#00FF00"

    def test_entry_that_fails_validation_is_skipped(self, monkeypatch):
        def unreadable(entry, standard_colors):
            if entry.value == "#111111":
                return ColorDescriptor.model_validate({"id": None, "name": "Broken", "hex_code": "#111111"})
            return ColorDescriptor(id="ok", name="Fine", hex_code=entry.value)

        monkeypatch.setattr("services.color.describe_color_entry", unreadable)

        colors = normalize_colors(["#111111", "#222222"], StandardColorIndex(FailingSession()))

        assert [c.hex_code for c in colors] == ["#222222"]

    def test_hex_with_trailing_newline_is_unrecognized(self, db_session, make_product):
        assert classify_color_entry("#FF0000\n").source == ColorSource.UNRECOGNIZED

        product = make_product(colors=["#FF0000\n"])
        assert resolve_product_colors(db_session, product.id) == []

    def test_non_list_legacy_value_yields_nothing(self, db_session, make_product):
        product = make_product(colors={"hex_code": "#FF0000"})
        assert resolve_product_colors(db_session, product.id) == []

    def test_no_colors_anywhere(self, db_session, make_product):
        product = make_product(colors=None)
        assert resolve_product_colors(db_session, product.id) == []


class TestJoinRowColors:

    def test_rows_take_precedence_over_legacy(self, db_session, standard_colors, make_product, add_color_row):
        navy = standard_colors["Navy"]
        product = make_product(colors=["#FF0000"])
        add_color_row(product.id, color_id=navy.id, position=0)
        custom = add_color_row(product.id, custom_hex_code="#ABCDEF", position=1)

        colors = resolve_product_colors(db_session, product.id)

        assert [c.model_dump() for c in colors] == [
            {"id": navy.id, "name": "Navy", "hex_code": navy.hex_code, "custom": False},
            {"id": custom.id, "name": "Custom", "hex_code": "#ABCDEF", "custom": True},
        ]

    def test_rows_follow_position(self, db_session, standard_colors, make_product, add_color_row):
        product = make_product()
        add_color_row(product.id, custom_hex_code="#222222", position=2)
        add_color_row(product.id, custom_hex_code="#111111", position=1)

        colors = resolve_product_colors(db_session, product.id)

        assert [c.hex_code for c in colors] == ["#111111", "#222222"]


class TestStandardColorLookupFailure:

    def test_lookup_failure_means_no_match(self):
        session = FailingSession()
        index = StandardColorIndex(session)

        assert index.match("#FF0000") is None
        assert session.rolled_back is True

    def test_hex_falls_back_to_custom_when_lookup_fails(self):
        colors = normalize_colors(["#FF0000"], StandardColorIndex(FailingSession()))

        assert colors[0].id == "color-#FF0000"
        assert colors[0].custom is True

    def test_resolution_failure_returns_empty_list(self):
        assert resolve_product_colors(FailingSession(), "missing-product") == []


class TestReplaceProductColors:

    def test_replaces_existing_rows(self, db_session, standard_colors, make_product, add_color_row):
        red = standard_colors["Red"]
        product = make_product()
        add_color_row(product.id, custom_hex_code="#999999")

        replace_product_colors(db_session, product.id, [
            ColorInput(id=red.id, name="Red", hex_code="#FF0000"),
            ColorInput(name="Mint", hex_code="#aaffcc", custom=True),
        ])
        db_session.commit()

        rows = db_session.query(ProductColor).filter(
            ProductColor.product_id == product.id
        ).order_by(ProductColor.position).all()
        assert [(r.color_id, r.custom_hex_code) for r in rows] == [(red.id, None), (None, "#AAFFCC")]

    def test_unknown_standard_id_is_stored_as_custom(self, db_session, standard_colors, make_product):
        product = make_product()

        rows = replace_product_colors(db_session, product.id, [
            ColorInput(id="not-a-color", name="Teal", hex_code="#008080"),
        ])
        db_session.commit()

        assert rows[0].color_id is None
        assert rows[0].custom_hex_code == "#008080"
