"""
Unit Tests for InstitutionRegistry and JSON layout loading
"""
import json
import pytest

from statement_import.parsing.config.layout import InstitutionConfig
from statement_import.parsing.config.registry import InstitutionRegistry
from statement_import.parsing.exceptions import LayoutConfigError
from statement_import.parsing.sections import OneOf, Section


# ============================================================================
# FIXTURES
# ============================================================================

def minimal_layout(institution="acme", keywords=("ACME Securities",)):
    return {
        "institution": institution,
        "name": institution.upper(),
        "keywords": list(keywords),
        "coercion": {"locale": "de_DE", "date_formats": ["DMY"]},
        "document_types": [{
            "pattern": "Kontoauszug",
            "context": [{"name": "currency", "patterns": ["Währung: (?P<currency>\\w{3})"]}],
            "transactions": [{
                "kind": "deposit",
                "block": {"start": "^Einzahlung"},
                "steps": [{
                    "section": {
                        "name": "deposit",
                        "patterns": [{"regex": "^Einzahlung (?P<date>\\S+) (?P<amount>[\\d.,]+)$",
                                      "attributes": ["date", "amount"]}],
                        "context": ["currency"],
                        "fields": {"date": "date", "amount": "amount", "currency": "currency"},
                    }
                }],
            }],
        }],
    }


@pytest.fixture
def layouts_dir(tmp_path):
    (tmp_path / "b_acme.json").write_text(json.dumps(minimal_layout()), encoding="utf-8")
    (tmp_path / "a_other.json").write_text(
        json.dumps(minimal_layout("other", keywords=["Other Bank"])), encoding="utf-8")
    return tmp_path


# ============================================================================
# TEST: LOADING
# ============================================================================

class TestLoading:

    def test_loads_in_file_name_order(self, layouts_dir):
        registry = InstitutionRegistry(str(layouts_dir))
        assert registry.list_layouts() == ["other", "acme"]

    def test_skips_malformed_files(self, layouts_dir):
        (layouts_dir / "c_broken.json").write_text("{not json", encoding="utf-8")
        bad_regex = minimal_layout("bad")
        bad_regex["document_types"][0]["transactions"][0]["steps"][0]["section"]["patterns"] = ["(?P<date"]
        (layouts_dir / "d_bad_regex.json").write_text(json.dumps(bad_regex), encoding="utf-8")
        (layouts_dir / "e_missing.json").write_text(json.dumps({"institution": "x"}), encoding="utf-8")

        registry = InstitutionRegistry(str(layouts_dir))
        assert registry.list_layouts() == ["other", "acme"]

    def test_missing_directory(self, tmp_path):
        registry = InstitutionRegistry(str(tmp_path / "nowhere"))
        assert registry.list_layouts() == []

    def test_bundled_layouts(self, bundled_registry):
        assert "questrade" in bundled_registry.list_layouts()

    def test_duplicate_registration_rejected(self, layouts_dir):
        registry = InstitutionRegistry(str(layouts_dir))
        with pytest.raises(LayoutConfigError):
            registry.register(InstitutionConfig.from_dict(minimal_layout()))


# ============================================================================
# TEST: DETECTION
# ============================================================================

class TestDetect:

    def test_detect_by_keywords(self, layouts_dir):
        registry = InstitutionRegistry(str(layouts_dir))
        assert registry.detect("ACME Securities\nKontoauszug").institution == "acme"
        assert registry.detect("Unknown\nKontoauszug") is None

    def test_detect_by_pattern_without_keywords(self):
        registry = InstitutionRegistry()
        registry.register(InstitutionConfig.from_dict(minimal_layout(keywords=())))
        assert registry.detect("Kontoauszug März").institution == "acme"

    def test_detect_questrade(self, bundled_registry, questrade_text):
        assert bundled_registry.detect(questrade_text).name == "Questrade, Inc."

    def test_get(self, layouts_dir):
        registry = InstitutionRegistry(str(layouts_dir))
        assert registry.get("acme").name == "ACME"
        assert registry.get("missing") is None


# ============================================================================
# TEST: LAYOUT PARSING
# ============================================================================

class TestFromDict:

    def test_builds_section_tree(self, questrade_config):
        dtype = questrade_config.document_types[0]
        kinds = [t.kind for t in dtype.transactions]
        assert kinds == ["deposit", "buy", "dividend"]

        buy_steps = dtype.transactions[1].steps
        assert isinstance(buy_steps[0], Section)
        assert isinstance(buy_steps[1], OneOf)
        assert [s.name for s in buy_steps[2].alternatives] == [
            "agent_without_fee", "agent_with_fee", "average_price_ask",
        ]
        assert dtype.required_context_keys() == ["currency"]

    def test_coercion_parameters(self, questrade_config):
        coercion = questrade_config.coercion
        assert coercion.default_exchange_suffix == ".TO"
        assert coercion.resolved_date_formats == ["%m-%d-%Y"]
        assert coercion.number_locale.grouping_separator == ","

    def test_separators_without_locale(self):
        data = minimal_layout()
        data["coercion"] = {"amount_decimal_separator": ",", "amount_thousand_separator": "."}
        config = InstitutionConfig.from_dict(data)
        assert config.coercion.amount("1.234,56") == 123456

    @pytest.mark.parametrize("mutate", [
        lambda d: d["coercion"].update(locale="xx_XX"),
        lambda d: d["coercion"].update(unknown_option=True),
        lambda d: d["document_types"][0].update(match_mode="page"),
        lambda d: d["document_types"][0]["transactions"][0].update(kind="transfer"),
        lambda d: d["document_types"][0]["transactions"][0].update(steps=[]),
        lambda d: d["document_types"][0]["transactions"][0]["steps"][0]["section"].update(fields={"price": "p"}),
        lambda d: d["document_types"][0]["transactions"][0]["steps"][0]["section"]["patterns"][0].update(attributes=["fee"]),
        lambda d: d["document_types"][0]["context"][0].update(fields={"currency": "currency"}),
        lambda d: d.pop("document_types"),
    ])
    def test_malformed_layouts(self, mutate):
        data = minimal_layout()
        mutate(data)
        with pytest.raises(LayoutConfigError):
            InstitutionConfig.from_dict(data)
