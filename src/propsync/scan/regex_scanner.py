"""Lexical component scanner for JavaScript and TypeScript sources.

Definitions and JSX usages are recovered with regular expressions over the
raw text; there is no parser behind this module. Known precision limits:

* a destructuring pattern ends at the first ``}``, so nested braces in a
  default value truncate the prop list;
* a JSX tag ends at the first ``>``, so an arrow function inside an
  attribute value cuts the attribute region short;
* spread attributes (``{...rest}``) contribute no prop names.
"""

from __future__ import annotations

import re

from propsync.scan.adapter_contract import (
    ComponentDefinition,
    ComponentScanner,
    DefinitionMatch,
    TagMatch,
    UsageSite,
)
from propsync.scan.props import normalize_props

COMPONENT_NAME = r"[A-Z][A-Za-z0-9_]*"
_EXPORT_PREFIX = r"(?:export\s+default\s+|export\s+)?"
# `({ a, b }: Props)` keeps the annotation outside the captured props.
_PARAM_TAIL = r"\s*(?::[^)]*)?\)"

_FUNCTION_TEMPLATE = _EXPORT_PREFIX + r"function\s+({name})\s*\(\s*\{{([^}}]*)\}}" + _PARAM_TAIL
_ARROW_TEMPLATE = (
    _EXPORT_PREFIX
    + r"(?:const|let)\s+({name})\s*=\s*\(\s*\{{([^}}]*)\}}"
    + _PARAM_TAIL
    + r"\s*=>"
)

_ATTRIBUTE_RE = re.compile(r"\b([a-zA-Z_][A-Za-z0-9_]*)\s*=")


def definition_patterns(name: str | None = None) -> tuple[tuple[str, re.Pattern[str]], ...]:
    """Return the (form, pattern) pairs, function form first."""
    name_pattern = COMPONENT_NAME if name is None else re.escape(name)
    return (
        ("function", re.compile(_FUNCTION_TEMPLATE.format(name=name_pattern))),
        ("arrow", re.compile(_ARROW_TEMPLATE.format(name=name_pattern))),
    )


def tag_pattern(name: str | None = None) -> re.Pattern[str]:
    name_pattern = COMPONENT_NAME if name is None else re.escape(name)
    return re.compile(r"<(" + name_pattern + r")\b(.*?)(/?)>", re.DOTALL)


_ANY_DEFINITION_PATTERNS = definition_patterns()
_ANY_TAG_RE = tag_pattern()


def attribute_names(attrs: str) -> tuple[str, ...]:
    names: list[str] = []
    for match in _ATTRIBUTE_RE.finditer(attrs):
        name = match.group(1)
        if name not in names:
            names.append(name)
    return tuple(names)


def _definition_match(form: str, match: re.Match[str]) -> DefinitionMatch:
    props_raw = match.group(2)
    return DefinitionMatch(
        name=match.group(1),
        form=form,
        props_raw=props_raw,
        props_start=match.start(2),
        props_end=match.end(2),
        props=tuple(normalize_props(props_raw)),
    )


def _tag_match(match: re.Match[str]) -> TagMatch:
    return TagMatch(
        component_name=match.group(1),
        start=match.start(),
        end=match.end(),
        insert_offset=match.start(3),
        attributes=attribute_names(match.group(2) or ""),
        self_closing=match.group(3) == "/",
    )


class RegexComponentScanner(ComponentScanner):
    language_ids = (
        "javascriptreact",
        "typescriptreact",
        "javascript",
        "typescript",
    )
    file_extensions = (".jsx", ".tsx", ".js", ".ts")

    def iter_definition_matches(self, text: str) -> list[DefinitionMatch]:
        matches: list[DefinitionMatch] = []
        for form, pattern in _ANY_DEFINITION_PATTERNS:
            for match in pattern.finditer(text):
                matches.append(_definition_match(form, match))
        return matches

    def extract_definitions(self, text: str) -> list[ComponentDefinition]:
        return [
            ComponentDefinition(name=match.name, props=match.props)
            for match in self.iter_definition_matches(text)
        ]

    def extract_usages(self, text: str) -> list[UsageSite]:
        usages: list[UsageSite] = []
        for match in _ANY_TAG_RE.finditer(text):
            tag = _tag_match(match)
            if not tag.attributes:
                continue
            usages.append(UsageSite(component_name=tag.component_name, props=tag.attributes))
        return usages

    def find_definition(self, text: str, name: str) -> DefinitionMatch | None:
        for form, pattern in definition_patterns(name):
            match = pattern.search(text)
            if match is not None:
                return _definition_match(form, match)
        return None

    def find_tags(self, text: str, name: str) -> list[TagMatch]:
        return [_tag_match(match) for match in tag_pattern(name).finditer(text)]
