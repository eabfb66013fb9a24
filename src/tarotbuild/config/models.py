"""
Pydantic models for validating and hashing build configuration files.
"""

from __future__ import annotations

import hashlib
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import ConfigError

DEFAULT_CONFIG_FILENAME = "tarotbuild.toml"

_PATH_FIELDS = (
    "entry_script",
    "entry_stylesheet",
    "content",
    "index_template",
    "spread_template",
    "category_template",
    "dist_dir",
    "assets_dir",
    "spread_dir",
    "category_dir",
)

# Page directories are published under root, so their URLs are root-relative.
_PUBLIC_PAGE_FIELDS = ("spread_dir", "category_dir")


class BuildConfig(BaseModel):
    """
    Top-level configuration for a site build.

    Every relative path is resolved against ``root`` so the pipeline never
    depends on the process working directory.

    Attributes:
        root: Project root; also the public directory that receives copies.
        entry_script: JSX/JS entry point handed to the bundler.
        entry_stylesheet: CSS entry point handed to the bundler.
        content: TOML file holding the spread and category table.
        index_template: Template for the top-level page.
        spread_template: Template rendered once per spread.
        category_template: Template rendered once per category.
        dist_dir: Build output directory (index page, manifest).
        assets_dir: Public asset directory receiving copies of the bundles.
        spread_dir: Public directory for per-spread pages.
        category_dir: Public directory for per-category pages.
        asset_basename: Base name of the hashed bundle files.
        target: Language-feature baseline passed to the bundler.
        esbuild: Bundler executable name or path.
        site_name: Site name used in page titles.
        site_url: Absolute site URL for canonical links and the sitemap.
        keep_files: Files the cleaner never removes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: Path = Field(default_factory=Path.cwd)
    entry_script: Path = Path("src/main.jsx")
    entry_stylesheet: Path = Path("src/index.css")
    content: Path = Path("content/spreads.toml")
    index_template: Path = Path("index.template.html")
    spread_template: Path = Path("templates/spread.template.html")
    category_template: Path = Path("templates/category.template.html")
    dist_dir: Path = Path("dist")
    assets_dir: Path = Path("assets")
    spread_dir: Path = Path("spreads")
    category_dir: Path = Path("categories")
    asset_basename: str = "index"
    target: List[str] = Field(default_factory=lambda: ["es2020"])
    esbuild: Optional[str] = None
    site_name: str = "Tarot Spreads"
    site_url: Optional[str] = None
    keep_files: List[str] = Field(default_factory=lambda: [".gitkeep"])

    @field_validator("site_url")
    @classmethod
    def _strip_trailing_slash(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError("site_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("asset_basename")
    @classmethod
    def _check_basename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("asset_basename must be a plain file name")
        return value

    @model_validator(mode="after")
    def _pages_inside_root(self) -> "BuildConfig":
        root = self.root.expanduser().resolve()
        for name in _PUBLIC_PAGE_FIELDS:
            target = self.resolve(getattr(self, name))
            try:
                target.relative_to(root)
            except ValueError:
                raise ValueError(f"{name} must be inside root ({root}), got {target}") from None
        return self

    def resolve(self, value: Path) -> Path:
        """Resolve a configured path against the project root."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path.resolve()

    @property
    def dist_assets_dir(self) -> Path:
        return self.resolve(self.dist_dir) / "assets"

    @property
    def hash(self) -> str:
        """
        Deterministic hash of the normalized config, used to detect changes.
        """
        payload = self.model_dump(mode="json", round_trip=True)
        blob = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.sha256(blob).hexdigest()


def load_config(path: Path | str) -> BuildConfig:
    """
    Load and validate a TOML config file into a BuildConfig instance.

    ``root`` defaults to the directory holding the config file; a relative
    ``root`` is resolved against that directory as well.

    Raises:
        ConfigError: If the file is missing, unreadable, or invalid.
    """
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with config_path.open("rb") as handle:
            raw_data: Dict[str, Any] = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in configuration file: {exc}") from exc

    raw_data = _normalize_root(raw_data, config_path.parent)

    try:
        return BuildConfig.model_validate(raw_data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def _normalize_root(data: Dict[str, Any], base: Path) -> Dict[str, Any]:
    normalized = dict(data)
    root = normalized.get("root")
    if root is None:
        normalized["root"] = base
    else:
        root_path = Path(str(root)).expanduser()
        normalized["root"] = root_path if root_path.is_absolute() else (base / root_path).resolve()
    if isinstance(normalized.get("target"), str):
        normalized["target"] = [normalized["target"]]
    return normalized


def config_paths(config: BuildConfig) -> Dict[str, Path]:
    """Return every configured path resolved against the project root."""
    return {name: config.resolve(getattr(config, name)) for name in _PATH_FIELDS}
