"""
Tests for JSON extraction helpers.
"""

import pytest

from estudio.generation.json_extract import extract_json_object, first_string


class TestExtractJsonObject:
    """Tests for extract_json_object()."""

    def test_plain_json(self):
        """Test a JSON object string is parsed."""
        assert extract_json_object('{"resultUrls": ["a"]}') == {"resultUrls": ["a"]}

    def test_dict_passes_through(self):
        """Test already-decoded objects are returned as is."""
        data = {"a": 1}
        assert extract_json_object(data) is data

    def test_object_inside_prose(self):
        """Test an object wrapped in surrounding text is found."""
        text = 'Here is the result:\n```json\n{"url": "https://x/y.png"}\n```\nDone.'

        assert extract_json_object(text) == {"url": "https://x/y.png"}

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "not json at all", "[1, 2, 3]", '{"broken": ', 42],
    )
    def test_misses_return_none(self, value):
        """Test anything without an object yields None instead of raising."""
        assert extract_json_object(value) is None


class TestFirstString:
    """Tests for first_string()."""

    def test_dotted_paths_and_indices(self):
        """Test nested keys and list indices are followed in order."""
        data = {"resultUrls": ["https://a"], "images": [{"url": "https://b"}]}

        assert first_string(data, "missing", "resultUrls.0") == "https://a"
        assert first_string(data, "images.0.url") == "https://b"

    def test_skips_empty_and_non_strings(self):
        """Test empty strings, numbers and out-of-range indices are skipped."""
        data = {"a": "", "b": 3, "c": [], "d": "ok"}

        assert first_string(data, "a", "b", "c.0", "d") == "ok"
        assert first_string(data, "c.5") is None
        assert first_string(None, "a") is None
