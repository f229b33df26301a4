"""Tests for ``generate_client``."""

from __future__ import annotations

from pathlib import Path

import pytest

from thisgen.commands import generate_client
from thisgen.errors import ThisgenError
from thisgen.writer import DryRunWriter


pytestmark = pytest.mark.unit


@pytest.fixture
def shop(api_root, write_entity, product_model_rs, product_descriptor_rs, category_model_rs, links_yaml) -> Path:
    write_entity("product", product_model_rs, product_descriptor_rs)
    write_entity("category", category_model_rs)
    (api_root / "config").mkdir()
    (api_root / "config" / "links.yaml").write_text(links_yaml, encoding="utf-8")
    return api_root


class TestGenerateClient:
    def test_default_output(self, shop: Path):
        output = generate_client(shop)
        assert output == shop / "api-client.ts"
        text = output.read_text(encoding="utf-8")
        assert "export function listProducts(" in text
        assert "export function listProductCategories(" in text

    def test_explicit_output(self, shop: Path, tmp_path: Path):
        target = tmp_path / "web" / "src" / "api-client.ts"
        assert generate_client(shop, target) == target
        assert target.exists()

    def test_byte_stable(self, shop: Path):
        first = generate_client(shop).read_text(encoding="utf-8")
        second = generate_client(shop).read_text(encoding="utf-8")
        assert first == second

    def test_unsupported_language(self, shop: Path):
        with pytest.raises(ThisgenError, match="Unsupported language: 'python'"):
            generate_client(shop, lang="python")

    def test_no_entities(self, api_root: Path):
        with pytest.raises(ThisgenError, match="No entities found"):
            generate_client(api_root)

    def test_bad_entity_is_warned_and_skipped(self, shop: Path, write_entity, capsys):
        write_entity("broken", 'impl_data_entity!(Broken, "broken", [], { tags: Vec<String> });')
        text = generate_client(shop).read_text(encoding="utf-8")
        assert "Broken" not in text
        assert "broken.tags" in capsys.readouterr().out

    def test_malformed_links_document(self, shop: Path):
        (shop / "config" / "links.yaml").write_text("links: {}\n", encoding="utf-8")
        with pytest.raises(ThisgenError, match="links.yaml"):
            generate_client(shop)

    def test_dry_run(self, shop: Path):
        writer = DryRunWriter()
        output = generate_client(shop, writer=writer)
        assert not output.exists()
        assert "export function listProducts(" in writer.written[output]
