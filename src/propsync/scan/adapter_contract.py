from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Tuple, runtime_checkable


@dataclass(frozen=True)
class ComponentDefinition:
    name: str
    props: Tuple[str, ...]


@dataclass(frozen=True)
class UsageSite:
    component_name: str
    props: Tuple[str, ...]


@dataclass(frozen=True)
class DefinitionMatch:
    name: str
    form: str
    props_raw: str
    props_start: int
    props_end: int
    props: Tuple[str, ...]


@dataclass(frozen=True)
class TagMatch:
    component_name: str
    start: int
    end: int
    insert_offset: int
    attributes: Tuple[str, ...]
    self_closing: bool

    def missing(self, props: Tuple[str, ...] | list[str]) -> list[str]:
        present = set(self.attributes)
        missing: list[str] = []
        for prop in props:
            if prop in present or prop in missing:
                continue
            missing.append(prop)
        return missing


@runtime_checkable
class ComponentScanner(Protocol):
    language_ids: tuple[str, ...]
    file_extensions: tuple[str, ...]

    def extract_definitions(self, text: str) -> list[ComponentDefinition]: ...

    def extract_usages(self, text: str) -> list[UsageSite]: ...

    def find_definition(self, text: str, name: str) -> DefinitionMatch | None: ...

    def find_tags(self, text: str, name: str) -> list[TagMatch]: ...
