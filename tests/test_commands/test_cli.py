"""Tests for the argparse entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

from thisgen.cli import build_parser, main


pytestmark = pytest.mark.unit


class TestParser:
    def test_add_entity_arguments(self):
        args = build_parser().parse_args(
            ["add-entity", "product", "--fields", "sku:String", "--validated", "--root", "api"]
        )
        assert args.command == "add-entity"
        assert args.name == "product"
        assert args.fields == "sku:String"
        assert args.indexed == "name"
        assert args.validated is True
        assert args.root == "api"
        assert args.dry_run is False

    def test_add_link_arguments(self):
        args = build_parser().parse_args(["add-link", "order", "invoice", "--no-validation-rule", "--dry-run"])
        assert (args.source, args.target) == ("order", "invoice")
        assert args.no_validation_rule is True
        assert args.dry_run is True
        assert args.link_type is None

    def test_generate_rejects_unknown_language(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["generate-client", "--lang", "python"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_full_flow(self, api_root: Path):
        root = str(api_root)
        main(["init", "--root", root, "--name", "shop"])
        main(["add-entity", "product", "--fields", "sku:String,price:f64", "--root", root])
        main(["add-link", "product", "product", "--link-type", "related", "--forward", "related",
              "--root", root])
        main(["generate-client", "--root", root])
        main(["doctor", "--root", root])
        assert (api_root / "api-client.ts").exists()

    def test_error_exits_with_one(self, api_root: Path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["generate-client", "--root", str(api_root)])
        assert excinfo.value.code == 1
        assert "No entities found" in capsys.readouterr().out

    def test_doctor_errors_exit_with_one(self, api_root: Path, write_entity):
        write_entity("broken", "pub struct Broken;\n")
        with pytest.raises(SystemExit) as excinfo:
            main(["doctor", "--root", str(api_root)])
        assert excinfo.value.code == 1
