from __future__ import annotations


def normalize_prop(segment: str) -> str:
    """Reduce one destructuring element to its bare prop name.

    ``age = 3`` -> ``age``; ``onClick?: () => void`` -> ``onClick``.

    Whitespace is trimmed before the optional marker is removed, so
    ``onClick? : () => void`` also yields ``onClick``.
    """
    name = segment.split("=", 1)[0]
    name = name.split(":", 1)[0]
    name = name.strip()
    if name.endswith("?"):
        name = name[:-1]
    return name.strip()


def normalize_props(props_raw: str) -> list[str]:
    # Plain comma split: commas inside defaults or type annotations mis-split.
    names: list[str] = []
    for segment in props_raw.split(","):
        if not segment.strip():
            continue
        name = normalize_prop(segment)
        if name:
            names.append(name)
    return names


def union_props(definition_props: list[str], usage_props: list[str]) -> list[str]:
    merged: list[str] = []
    for name in [*definition_props, *usage_props]:
        if name not in merged:
            merged.append(name)
    return merged
