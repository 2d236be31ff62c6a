"""Tests for name normalization helpers."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network.normalize import (
    clean_string,
    humanize_category,
    name_sort_key,
    normalize_category,
    normalize_key,
    normalize_names,
    slugify,
    strip_area_prefix,
)


class TestNormalizeKey:
    """Tests for cross-source name keys."""

    def test_trim_and_casefold(self):
        """Test keys ignore surrounding whitespace and case."""
        assert normalize_key(" PRISTINA ") == normalize_key("pristina")
        assert normalize_key(None) == ""
        assert clean_string(42) == "42"

    def test_normalize_names_drops_empties(self):
        """Test blank names are dropped from name sets."""
        assert normalize_names(["Center", " ", None, "center"]) == frozenset({"center"})

    def test_sort_key_ignores_diacritics(self):
        """Test diacritics do not affect ordering."""
        assert name_sort_key("Fushë Kosovë")[0] == "fushe kosove"
        assert name_sort_key("Ferizaj") < name_sort_key("Fushë Kosovë")


class TestCategories:
    """Tests for business category helpers."""

    def test_normalize_category(self):
        """Test categories are lower-cased with an ``other`` fallback."""
        assert normalize_category(" Bakery ") == "bakery"
        assert normalize_category("") == "other"
        assert normalize_category(None) == "other"

    def test_humanize_category(self):
        """Test category labels for the legend."""
        assert humanize_category("department_store") == "Department Store"
        assert humanize_category("health-food") == "Health Food"
        assert humanize_category("") == "Other"


class TestAreaNames:
    """Tests for area name cleanup."""

    def test_strip_area_prefix(self):
        """Test the numbering prefix is removed."""
        assert strip_area_prefix("03 - Center") == "Center"
        assert strip_area_prefix("Center") == "Center"

    def test_slugify(self):
        """Test slugs used for synthesized area codes."""
        assert slugify("Unknown area") == "unknown-area"
        assert slugify(" North  East ") == "north-east"
