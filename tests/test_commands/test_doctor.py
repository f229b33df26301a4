"""Tests for the ``doctor`` diagnostics."""

from __future__ import annotations

from pathlib import Path

import pytest

from thisgen.commands import DiagnosticLevel, add_entity, add_link, doctor, run_checks
from thisgen.config import Config


pytestmark = pytest.mark.unit


def _messages(report, level: DiagnosticLevel) -> list[str]:
    return [d.message for d in report.diagnostics if d.level == level]


class TestDoctor:
    def test_coherent_project(self, scaffolded_project: Path):
        add_entity(scaffolded_project, "product", fields="sku:String")
        add_entity(scaffolded_project, "category", fields="label:String")
        add_link(scaffolded_project, "product", "category")

        report = run_checks(Config.for_root(scaffolded_project))
        assert report.count(DiagnosticLevel.WARN) == 0
        assert not report.has_errors
        assert "2 entities introspected" in _messages(report, DiagnosticLevel.PASS)

    def test_unregistered_entity(self, scaffolded_project: Path, write_entity, category_model_rs):
        write_entity("category", category_model_rs)
        report = run_checks(Config.for_root(scaffolded_project))
        warnings = _messages(report, DiagnosticLevel.WARN)
        assert "'category' is not declared in src/entities/mod.rs" in warnings
        assert (
            "'category' is not registered under: entity_types, register_entities, "
            "entity_fetchers, entity_creators"
        ) in warnings
        assert (
            "'category' is not registered under: store_fields, store_init_vars, store_init_fields"
        ) in warnings

    def test_registration_of_longer_name_does_not_count(
        self, scaffolded_project: Path, write_entity, product_model_rs
    ):
        add_entity(scaffolded_project, "sub_product", fields="label:String")
        write_entity("product", product_model_rs)
        report = run_checks(Config.for_root(scaffolded_project))
        warnings = _messages(report, DiagnosticLevel.WARN)
        assert (
            "'product' is not registered under: entity_types, register_entities, "
            "entity_fetchers, entity_creators"
        ) in warnings
        assert (
            "'product' is not registered under: store_fields, store_init_vars, store_init_fields"
        ) in warnings

    def test_legacy_file(self, scaffolded_project: Path):
        stores_path = scaffolded_project / "src" / "stores.rs"
        stores_path.write_text("pub struct Stores;\n", encoding="utf-8")
        report = run_checks(Config.for_root(scaffolded_project))
        assert any("legacy file" in message for message in _messages(report, DiagnosticLevel.WARN))

    def test_unknown_link_endpoint(self, scaffolded_project: Path):
        add_entity(scaffolded_project, "order", fields="total:f64")
        add_link(scaffolded_project, "order", "invoice")
        report = run_checks(Config.for_root(scaffolded_project))
        assert (
            "'has_invoice' references unknown target entity 'invoice'"
            in _messages(report, DiagnosticLevel.WARN)
        )

    def test_broken_entity_is_an_error(self, scaffolded_project: Path, write_entity):
        write_entity("broken", "pub struct Broken;\n")
        report = run_checks(Config.for_root(scaffolded_project))
        assert report.has_errors

    def test_invalid_links_document(self, scaffolded_project: Path):
        (scaffolded_project / "config" / "links.yaml").write_text("- a\n", encoding="utf-8")
        report = run_checks(Config.for_root(scaffolded_project))
        assert report.has_errors
        assert report.diagnostics[0].category == "Links"

    def test_prints_summary(self, scaffolded_project: Path, capsys):
        report = doctor(scaffolded_project)
        out = capsys.readouterr().out
        assert "Doctor" in out
        assert "Passed" in out
        assert not report.has_errors
