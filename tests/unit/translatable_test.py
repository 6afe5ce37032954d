"""Tests for translatable field lookup and payload decoding."""

import pytest

from modelsearch.core.field_tree import parse_field_tree
from modelsearch.core.locales import LocaleSet, analyzer_for_locale
from modelsearch.core.translatable import decode_translations, is_translatable
from modelsearch.exceptions import ConfigurationError



class TestIsTranslatable:
    def test_top_level_leaf(self) -> None:
        tree = parse_field_tree(["title"])
        assert is_translatable("title", tree)
        assert not is_translatable("sku", tree)

    def test_relation_leaf(self) -> None:
        tree = parse_field_tree({"category": ["title"]})
        assert is_translatable("category.title", tree)
        assert not is_translatable("title", tree)
        assert not is_translatable("brand.title", tree)

    def test_top_level_leaf_does_not_cover_relation(self) -> None:
        tree = parse_field_tree(["title"])
        assert not is_translatable("category.title", tree)

    def test_nested_relation_leaf(self) -> None:
        tree = parse_field_tree({"category": {"parent": "title"}})
        assert is_translatable("category.parent.title", tree)
        assert not is_translatable("category.title", tree)

    def test_empty_tree(self) -> None:
        assert not is_translatable("title", parse_field_tree(None))


class TestDecodeTranslations:
    def test_mapping_passes_through(self) -> None:
        assert decode_translations({"en": "Bike"}) == {"en": "Bike"}

    def test_json_string(self) -> None:
        assert decode_translations('{"en": "Bike", "lv": "Velosipēds"}') == {"en": "Bike", "lv": "Velosipēds"}

    def test_json_bytes(self) -> None:
        assert decode_translations('{"lv": "Daļas"}'.encode("utf-8")) == {"lv": "Daļas"}

    def test_plain_text_is_not_a_payload(self) -> None:
        assert decode_translations("Bike") is None

    def test_json_list_is_not_a_payload(self) -> None:
        assert decode_translations('["Bike"]') is None

    def test_other_types_are_not_payloads(self) -> None:
        assert decode_translations(42) is None
        assert decode_translations(None) is None


class TestLocaleSet:
    def test_fallback_defaults_to_first_locale(self) -> None:
        locales = LocaleSet.of(["lv", "en"])
        assert locales.codes == ("lv", "en")
        assert locales.fallback == "lv"

    def test_duplicates_and_blanks_dropped(self) -> None:
        assert LocaleSet.of(["en", " en ", "", "lv"]).codes == ("en", "lv")

    def test_empty_locales_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            LocaleSet.of([])

    def test_unknown_fallback_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            LocaleSet.of(["en", "lv"], "ru")
        assert exc_info.value.path == "translatable.fallback_locale"

    def test_locale_analyzers(self) -> None:
        assert analyzer_for_locale("en") == "full_text_en"
        assert analyzer_for_locale("lv") == "full_text_lv"
        assert analyzer_for_locale("xx") == "standard"
