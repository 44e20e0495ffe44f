from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "propsync.toml"

DEFAULT_INCLUDE = "**/*.{tsx,jsx,ts,js}"
DEFAULT_EXCLUDE = "**/node_modules/**"
DEFAULT_PLACEHOLDER = "{/* TODO: completar */}"
SUPPORTED_LANGUAGES = (
    "javascriptreact",
    "typescriptreact",
    "javascript",
    "typescript",
)
DEFINITION_REWRITE_MODES = ("canonical", "append")

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class SyncSettings:
    include: str = DEFAULT_INCLUDE
    exclude: str = DEFAULT_EXCLUDE
    placeholder: str = DEFAULT_PLACEHOLDER
    languages: tuple[str, ...] = SUPPORTED_LANGUAGES
    definition_rewrite: str = "canonical"

    def accepts_language(self, language_id: str | None) -> bool:
        if not language_id:
            return False
        return language_id.lower() in self.languages


def _load_toml(path: Path) -> TomlTable:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def sync_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("sync", {})
    return section if isinstance(section, dict) else {}


def _language_ids(value: TomlValue) -> list[str]:
    # Accepts a TOML array or a single comma-separated string.
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list):
        return []
    return [item.strip().lower() for item in value if isinstance(item, str) and item.strip()]


def _as_text(value: TomlValue, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def sync_languages(section: TomlTable | None) -> tuple[str, ...]:
    if not isinstance(section, dict):
        return SUPPORTED_LANGUAGES
    requested = _language_ids(section.get("languages"))
    kept = tuple(name for name in requested if name in SUPPORTED_LANGUAGES)
    return kept or SUPPORTED_LANGUAGES


def settings_from_section(section: TomlTable | None) -> SyncSettings:
    if not isinstance(section, dict):
        return SyncSettings()
    rewrite = _as_text(section.get("definition_rewrite"), "canonical").lower()
    if rewrite not in DEFINITION_REWRITE_MODES:
        rewrite = "canonical"
    placeholder = section.get("placeholder")
    return SyncSettings(
        include=_as_text(section.get("include"), DEFAULT_INCLUDE),
        exclude=_as_text(section.get("exclude"), DEFAULT_EXCLUDE),
        # Placeholder text is inserted verbatim, so only blank values fall back.
        placeholder=placeholder if isinstance(placeholder, str) and placeholder.strip() else DEFAULT_PLACEHOLDER,
        languages=sync_languages(section),
        definition_rewrite=rewrite,
    )


def sync_settings(
    root: Path | None = None, config_path: Path | None = None
) -> SyncSettings:
    return settings_from_section(sync_defaults(root=root, config_path=config_path))


def apply_overrides(section: TomlTable, overrides: TomlTable | None) -> TomlTable:
    """Layer per-request settings over a ``[sync]`` table; ``None`` keeps the file value."""
    if not overrides:
        return dict(section)
    return {**section, **{key: value for key, value in overrides.items() if value is not None}}
