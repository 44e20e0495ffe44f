from __future__ import annotations

from pathlib import Path

from propsync import never
from propsync.scan.adapter_contract import ComponentScanner
from propsync.scan.regex_scanner import RegexComponentScanner


_SCANNERS_BY_LANGUAGE: dict[str, ComponentScanner] = {}
_SCANNERS_BY_EXTENSION: dict[str, ComponentScanner] = {}
_LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
}


def register_scanner(scanner: ComponentScanner) -> None:
    for language_id in scanner.language_ids:
        _SCANNERS_BY_LANGUAGE[language_id.lower()] = scanner
    for extension in scanner.file_extensions:
        _SCANNERS_BY_EXTENSION[extension.lower()] = scanner


def scanner_for_language(language_id: str | None) -> ComponentScanner | None:
    if not language_id:
        return None
    return _SCANNERS_BY_LANGUAGE.get(language_id.lower())


def scanner_for_extension(extension: str) -> ComponentScanner | None:
    return _SCANNERS_BY_EXTENSION.get(extension.lower())


def language_for_path(path: Path) -> str | None:
    return _LANGUAGE_BY_EXTENSION.get(path.suffix.lower())


def resolve_scanner(*, path: Path | None = None, language_id: str | None = None) -> ComponentScanner:
    if language_id is not None:
        scanner = scanner_for_language(language_id)
        if scanner is None:
            never("unknown scanner language", language_id=language_id)
        return scanner
    if path is not None:
        scanner = scanner_for_extension(path.suffix)
        if scanner is not None:
            return scanner
    # Import-time registration guarantees a canonical fallback scanner.
    return _SCANNERS_BY_LANGUAGE["typescriptreact"]


register_scanner(RegexComponentScanner())
