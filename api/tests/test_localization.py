"""Tests for the JSON catalog translator."""

import json

import pytest
from backoffice.services.localization import Translator


@pytest.fixture
def catalog_dir(tmp_path):
    (tmp_path / "flashes.en.json").write_text(
        json.dumps(
            {
                "lead.saved": "%name% has been saved.",
                "lead.merged": "%from% merged into %to%.",
                "only.english": "English only",
            }
        )
    )
    (tmp_path / "flashes.fr.json").write_text(
        json.dumps({"lead.saved": "%name% a été enregistré."})
    )
    return tmp_path


def test_translates_with_variables(catalog_dir):
    translator = Translator(str(catalog_dir))

    assert translator.translate("lead.saved", {"%name%": "Jane"}, domain="flashes") == (
        "Jane has been saved."
    )


def test_multiple_variables(catalog_dir):
    translator = Translator(str(catalog_dir))

    message = translator.translate(
        "lead.merged", {"%from%": "A", "%to%": "B"}, domain="flashes"
    )

    assert message == "A merged into B."


def test_active_locale_wins(catalog_dir):
    translator = Translator(str(catalog_dir), locale="fr")

    assert translator.translate("lead.saved", {"%name%": "Jean"}, domain="flashes") == (
        "Jean a été enregistré."
    )


def test_falls_back_to_fallback_locale(catalog_dir):
    translator = Translator(str(catalog_dir), locale="fr", fallback_locale="en")

    assert translator.translate("only.english", domain="flashes") == "English only"


def test_missing_key_returns_key_with_substitution(catalog_dir):
    translator = Translator(str(catalog_dir))

    assert translator.translate("x.%name%", {"%name%": "y"}, domain="flashes") == "x.y"


def test_missing_domain_returns_key(catalog_dir):
    translator = Translator(str(catalog_dir))

    assert translator.translate("lead.saved", domain="nope") == "lead.saved"


def test_non_object_catalog_is_rejected(tmp_path):
    (tmp_path / "messages.en.json").write_text(json.dumps(["not", "a", "mapping"]))
    translator = Translator(str(tmp_path))

    with pytest.raises(ValueError):
        translator.translate("anything")


def test_shipped_catalog(services):
    assert (
        services.translator.translate("backoffice.core.error.accessdenied", domain="flashes")
        == "Access denied."
    )
