"""Tests for ``add_link``."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from thisgen.commands import add_link
from thisgen.errors import ThisgenError
from thisgen.introspect import extract_relations


pytestmark = pytest.mark.unit


def _document(root: Path) -> dict:
    return yaml.safe_load((root / "config" / "links.yaml").read_text(encoding="utf-8"))


class TestAddLink:
    def test_defaults(self, scaffolded_project: Path):
        relation = add_link(scaffolded_project, "order", "invoice")
        assert relation.link_type == "has_invoice"
        assert relation.forward == "invoices"
        assert relation.reverse == "order"

        document = _document(scaffolded_project)
        assert document["links"] == [{
            "link_type": "has_invoice",
            "source_type": "order",
            "target_type": "invoice",
            "forward_route_name": "invoices",
            "reverse_route_name": "order",
            "description": "Order -> Invoice relationship",
            "auth": {
                "list": "authenticated",
                "get": "authenticated",
                "create": "authenticated",
                "update": "authenticated",
                "delete": "authenticated",
            },
        }]
        assert [e["singular"] for e in document["entities"]] == ["order", "invoice"]
        assert document["entities"][1]["plural"] == "invoices"
        assert document["validation_rules"] == {
            "has_invoice": [{"source": "order", "targets": ["invoice"]}]
        }

    def test_explicit_names(self, scaffolded_project: Path):
        add_link(
            scaffolded_project,
            "User",
            "Car",
            link_type="owns",
            forward="cars-owned",
            reverse="owner",
            description="Ownership",
        )
        (entry,) = _document(scaffolded_project)["links"]
        assert (entry["source_type"], entry["target_type"]) == ("user", "car")
        assert (entry["forward_route_name"], entry["reverse_route_name"]) == ("cars-owned", "owner")
        assert entry["description"] == "Ownership"

    def test_reads_back_through_extractor(self, scaffolded_project: Path):
        add_link(scaffolded_project, "product", "category")
        scan = extract_relations(_document(scaffolded_project))
        assert [r.key for r in scan.relations] == [("product", "category", "has_category")]
        assert scan.relations[0].forward == "categories"

    def test_duplicate_rejected(self, scaffolded_project: Path):
        add_link(scaffolded_project, "order", "invoice")
        before = (scaffolded_project / "config" / "links.yaml").read_text(encoding="utf-8")
        with pytest.raises(ThisgenError, match="already exists"):
            add_link(scaffolded_project, "order", "invoice")
        assert (scaffolded_project / "config" / "links.yaml").read_text(encoding="utf-8") == before

    def test_same_endpoints_other_type_allowed(self, scaffolded_project: Path):
        add_link(scaffolded_project, "order", "invoice")
        add_link(scaffolded_project, "order", "invoice", link_type="refunds")
        document = _document(scaffolded_project)
        assert [link["link_type"] for link in document["links"]] == ["has_invoice", "refunds"]
        assert len(document["entities"]) == 2

    def test_no_validation_rule(self, scaffolded_project: Path):
        add_link(scaffolded_project, "order", "invoice", validation_rule=False)
        assert _document(scaffolded_project)["validation_rules"] == {}

    def test_missing_document(self, api_root: Path):
        with pytest.raises(ThisgenError, match="not found"):
            add_link(api_root, "order", "invoice")

    def test_malformed_document(self, scaffolded_project: Path):
        (scaffolded_project / "config" / "links.yaml").write_text("links: {}\n", encoding="utf-8")
        with pytest.raises(ThisgenError, match="'links'"):
            add_link(scaffolded_project, "order", "invoice")

    def test_dry_run(self, scaffolded_project: Path):
        before = (scaffolded_project / "config" / "links.yaml").read_text(encoding="utf-8")
        add_link(scaffolded_project, "order", "invoice", dry_run=True)
        assert (scaffolded_project / "config" / "links.yaml").read_text(encoding="utf-8") == before
