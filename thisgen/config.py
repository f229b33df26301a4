"""thisgen configuration.

Centralised, typed configuration for every command. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .writer import FileWriter


class Config(BaseModel):
    """Layout of a ``this`` API project as seen by thisgen.

    All relative paths are resolved against ``api_root``.  Instances are
    typically created once by the CLI entry point and then passed to the
    command functions.
    """

    api_root: Path = Field(default=Path("."))
    entities_dir: str = Field(default="src/entities")
    links_file: str = Field(default="config/links.yaml")
    module_file: str = Field(default="src/module.rs")
    stores_file: str = Field(default="src/stores.rs")
    entities_mod_file: str = Field(default="src/entities/mod.rs")
    client_output: str = Field(
        default="api-client.ts",
        description="Where `generate-client` writes when no --output is given",
    )
    config_dir: str = Field(default=".thisgen")
    dry_run: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def entities_path(self) -> Path:
        """Directory holding one subdirectory per entity."""
        return self.api_root / self.entities_dir

    @property
    def links_path(self) -> Path:
        """Path to the relationship document (``links.yaml``)."""
        return self.api_root / self.links_file

    @property
    def module_path(self) -> Path:
        """Path to the generated ``module.rs``."""
        return self.api_root / self.module_file

    @property
    def stores_path(self) -> Path:
        """Path to the generated ``stores.rs``."""
        return self.api_root / self.stores_file

    @property
    def entities_mod_path(self) -> Path:
        """Path to the ``entities/mod.rs`` index."""
        return self.api_root / self.entities_mod_file

    @property
    def client_output_path(self) -> Path:
        """Default output path of the generated client."""
        return self.api_root / self.client_output

    @property
    def config_path(self) -> Path:
        """Default location of the persisted configuration."""
        return self.api_root / self.config_dir / "config.json"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None, writer: FileWriter | None = None) -> Path:
        """Persist the project layout to a JSON file.

        ``api_root`` and ``dry_run`` describe one invocation, not the project,
        so they are left out; ``for_root`` supplies them again on load.

        Args:
            path: Destination file. Defaults to ``<api_root>/.thisgen/config.json``.
            writer: Writer to go through. Defaults to a real ``FileWriter``.

        Returns:
            The path where the file was (or would be) written.
        """
        target = path or self.config_path
        settings = self.model_dump_json(indent=2, exclude={"api_root", "dry_run"})
        (writer or FileWriter()).write_file(target, settings + "\n")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def for_root(cls, api_root: str | Path, **overrides: Any) -> "Config":
        """Build a ``Config`` for *api_root*.

        A saved ``.thisgen/config.json`` under the root is used as the base
        when present.  ``api_root`` always points at the requested root, and
        explicit *overrides* win over both.
        """
        root = Path(api_root)
        saved = root / ".thisgen" / "config.json"
        if saved.exists():
            base = cls.load(saved).model_dump()
        else:
            base = cls.from_env().model_dump()
        base.update(overrides)
        base["api_root"] = root
        return cls(**base)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            THISGEN_API_ROOT, THISGEN_ENTITIES_DIR, THISGEN_LINKS_FILE,
            THISGEN_MODULE_FILE, THISGEN_STORES_FILE, THISGEN_CLIENT_OUTPUT,
            THISGEN_DRY_RUN.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("THISGEN_API_ROOT"):
            kwargs["api_root"] = Path(os.environ["THISGEN_API_ROOT"])
        if os.environ.get("THISGEN_ENTITIES_DIR"):
            kwargs["entities_dir"] = os.environ["THISGEN_ENTITIES_DIR"]
        if os.environ.get("THISGEN_LINKS_FILE"):
            kwargs["links_file"] = os.environ["THISGEN_LINKS_FILE"]
        if os.environ.get("THISGEN_MODULE_FILE"):
            kwargs["module_file"] = os.environ["THISGEN_MODULE_FILE"]
        if os.environ.get("THISGEN_STORES_FILE"):
            kwargs["stores_file"] = os.environ["THISGEN_STORES_FILE"]
        if os.environ.get("THISGEN_CLIENT_OUTPUT"):
            kwargs["client_output"] = os.environ["THISGEN_CLIENT_OUTPUT"]
        if os.environ.get("THISGEN_DRY_RUN"):
            kwargs["dry_run"] = os.environ["THISGEN_DRY_RUN"].lower() in ("1", "true", "yes")

        return cls(**kwargs)
