"""
Tests for the translate transform codec and the Vec2/Rect helpers.
"""
import pytest

from models.transform import Rect, Vec2
from utils.transform_codec import format_number, format_translate, parse_translate, split_transform


# ══════════════════════════════════════════════════════════════════════════
# Parsing
# ══════════════════════════════════════════════════════════════════════════

class TestParseTranslate:

    def test_reads_offset(self):
        assert parse_translate("translate(12px, -4px)") == Vec2(12, -4)

    def test_reads_offset_without_spaces(self):
        assert parse_translate("translate(5px,-5px)") == Vec2(5, -5)

    def test_reads_fractional_offset(self):
        assert parse_translate("translate(1.5px, .25px)") == Vec2(1.5, 0.25)

    def test_finds_translate_among_other_functions(self):
        assert parse_translate("rotate(10deg) translate(3px, 4px) scale(2)") == Vec2(3, 4)

    @pytest.mark.parametrize("text", [None, "", "rotate(10deg)", "translate(abc)", "translate(5%, 2%)", 42])
    def test_unreadable_resolves_to_origin(self, text):
        assert parse_translate(text) == Vec2(0, 0)


class TestSplitTransform:

    def test_separates_translate_and_rest(self):
        offset, rest = split_transform("translate(4px, 2px) rotate(10deg)")
        assert offset == Vec2(4, 2)
        assert rest == "rotate(10deg)"

    def test_translate_only(self):
        assert split_transform("translate(4px, 2px)") == (Vec2(4, 2), "")

    def test_no_translate_keeps_everything(self):
        assert split_transform("scale(2)") == (Vec2(0, 0), "scale(2)")

    def test_empty(self):
        assert split_transform(None) == (Vec2(0, 0), "")


# ══════════════════════════════════════════════════════════════════════════
# Formatting
# ══════════════════════════════════════════════════════════════════════════

class TestFormat:

    def test_integral_values_have_no_decimal_point(self):
        assert format_translate(Vec2(5.0, -5.0)) == "translate(5px,-5px)"

    def test_fractional_values(self):
        assert format_translate(Vec2(1.5, 0)) == "translate(1.5px,0px)"

    def test_negative_zero_is_zero(self):
        assert format_number(-0.0) == "0"

    def test_trailing_zeros_trimmed(self):
        assert format_number(2.25) == "2.25"


# ══════════════════════════════════════════════════════════════════════════
# Vec2 / Rect
# ══════════════════════════════════════════════════════════════════════════

class TestGeometry:

    def test_vec_arithmetic(self):
        assert Vec2(1, 2) + Vec2(3, 4) == Vec2(4, 6)
        assert Vec2(5, 5) - Vec2(1, 2) == Vec2(4, 3)
        assert Vec2(2, -3).scaled(2) == Vec2(4, -6)

    def test_vec_unpacks(self):
        x, y = Vec2(7, 8)
        assert (x, y) == (7, 8)

    def test_rect_contains_edges(self):
        rect = Rect(10, 10, 100, 50)
        assert rect.contains(Vec2(10, 10))
        assert rect.contains(Vec2(110, 60))
        assert not rect.contains(Vec2(111, 30))

    def test_rect_translated(self):
        assert Rect(0, 0, 10, 10).translated(Vec2(5, -5)) == Rect(5, -5, 10, 10)
