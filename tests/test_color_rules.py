"""
Tests for the static color knowledge.
"""
import pytest

from stylist_service.core.color_rules import (
    DEFAULT_PAIRINGS,
    PAIRING_RULES,
    to_color_name,
    find_complementary_colors,
    determine_color_harmony,
    describe_color_for_prompt,
)


class TestColorNames:
    """Tests for to_color_name."""

    @pytest.mark.parametrize("color,expected", [
        ("#000000", "Black"),
        ("#ffffff", "White"),
        ("#fff", "White"),
        ("#6C5CE7", "Indigo"),
        ("navy blue", "Navy blue"),
        ("Red", "Red"),
        ("#123456", "#123456"),
        ("#abcdef", "#ABCDEF"),
    ])
    def test_known_and_unknown_colors(self, color, expected):
        assert to_color_name(color) == expected

    def test_empty_values(self):
        assert to_color_name(None) is None
        assert to_color_name("   ") is None

    @pytest.mark.parametrize("color", ["#000000", "#fff", "#123abc", "navy blue", "Olive", "hot pink"])
    def test_normalization_is_idempotent(self, color):
        once = to_color_name(color)
        assert to_color_name(once) == once


class TestComplementaryColors:
    """Tests for the pairing lookup order."""

    def test_black_hex_uses_black_entry(self):
        assert find_complementary_colors("#000000") == PAIRING_RULES["black"]

    def test_name_key_match(self):
        assert find_complementary_colors("Navy Blue") == PAIRING_RULES["navy blue"]

    def test_hex_key_mapped_to_names(self):
        # #6C5CE7 has no name key ("indigo"), so its hex entry is used
        assert find_complementary_colors("#6C5CE7") == ["Teal", "Peach", "White"]

    def test_substring_match_on_name_keys(self):
        assert find_complementary_colors("dark olive") == PAIRING_RULES["olive"]

    def test_unknown_color_uses_default(self):
        assert find_complementary_colors("chartreuse") == DEFAULT_PAIRINGS
        assert find_complementary_colors(None) == DEFAULT_PAIRINGS

    def test_result_is_a_copy(self):
        colors = find_complementary_colors("red")
        colors.append("Neon")
        assert "Neon" not in PAIRING_RULES["red"]


class TestHarmony:
    """Tests for determine_color_harmony."""

    @pytest.mark.parametrize("color,expected", [
        ("#6C5CE7", "cool_minimal"),
        ("#00cec9", "cool_minimal"),
        ("#8B4513", "warm_earthy"),
        ("peach", "warm_earthy"),
        ("#DDA0DD", "soft_romantic"),
        ("Lavender", "soft_romantic"),
        ("#000000", "vibrant_modern"),
        ("red", "vibrant_modern"),
        (None, "vibrant_modern"),
    ])
    def test_decision_table(self, color, expected):
        assert determine_color_harmony(color) == expected


class TestPromptColors:
    def test_hex_table_and_names(self):
        assert describe_color_for_prompt("#FFD700") == "gold"
        assert describe_color_for_prompt("#123456") == "neutral"
        assert describe_color_for_prompt("Navy Blue") == "navy blue"
        assert describe_color_for_prompt(None) == "neutral"
