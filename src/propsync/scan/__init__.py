from propsync.scan.adapter_contract import (
    ComponentDefinition,
    ComponentScanner,
    DefinitionMatch,
    TagMatch,
    UsageSite,
)
from propsync.scan.props import normalize_prop, normalize_props, union_props
from propsync.scan.regex_scanner import RegexComponentScanner
from propsync.scan.registry import (
    language_for_path,
    register_scanner,
    resolve_scanner,
    scanner_for_extension,
    scanner_for_language,
)

__all__ = [
    "ComponentDefinition",
    "ComponentScanner",
    "DefinitionMatch",
    "RegexComponentScanner",
    "TagMatch",
    "UsageSite",
    "language_for_path",
    "normalize_prop",
    "normalize_props",
    "register_scanner",
    "resolve_scanner",
    "scanner_for_extension",
    "scanner_for_language",
    "union_props",
]
