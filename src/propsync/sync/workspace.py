from __future__ import annotations

import os
import re
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable, Iterator, Protocol, runtime_checkable

from propsync.sync.model import DocumentSnapshot, EditPlan, FileEditPlan

_TEST_INFIX_RE = re.compile(r"(\.test\.|\.spec\.)")
_TEST_DIR_RE = re.compile(r"/(__tests__|tests?)/")


@runtime_checkable
class Workspace(Protocol):
    """Editor-side collaborator consumed by the sync engine."""

    root: Path

    def find_files(self, include: str, exclude: str) -> list[Path]: ...

    def open_document(self, path: Path) -> DocumentSnapshot: ...

    def ask(self, message: str, accept_label: str, cancel_label: str) -> str | None: ...

    def apply_edit(self, plan: EditPlan) -> bool: ...

    def notify(self, message: str) -> None: ...


def _split_braces(pattern: str) -> list[str]:
    match = re.search(r"\{([^{}]*)\}", pattern)
    if match is None:
        return [pattern]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(
            _split_braces(pattern[: match.start()] + option + pattern[match.end() :])
        )
    return expanded


def _translate_glob(pattern: str) -> str:
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append("[^/]*")
            index += 1
        elif pattern[index] == "?":
            parts.append("[^/]")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return "".join(parts)


@lru_cache(maxsize=64)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a workspace glob (``**``, ``*``, ``?`` and ``{a,b}``)."""
    alternatives = [_translate_glob(item) for item in _split_braces(pattern.strip())]
    return re.compile("^(?:" + "|".join(alternatives) + ")$")


def glob_matches(relative: str, pattern: str | None) -> bool:
    if not pattern:
        return False
    return compile_glob(pattern).match(relative) is not None


def relative_posix(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return path.as_posix()


def is_test_file(path: Path, root: Path | None = None) -> bool:
    """Heuristic for fixtures and specs that sync must never edit."""
    relative = relative_posix(path, root) if root is not None else path.as_posix()
    normalized = "/" + relative.replace("\\", "/").lstrip("/")
    return bool(_TEST_INFIX_RE.search(normalized) or _TEST_DIR_RE.search(normalized))


def discover_files(root: Path, include: str, exclude: str | None = None) -> list[Path]:
    """Enumerate files under ``root`` matching ``include`` in sorted order."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = relative_posix(current, root)
        rel_prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not glob_matches(rel_prefix + name + "/", exclude)
        )
        for name in sorted(filenames):
            relative = rel_prefix + name
            if not glob_matches(relative, include):
                continue
            if glob_matches(relative, exclude):
                continue
            found.append(current / name)
    return found


def candidate_files(workspace: Workspace, include: str, exclude: str) -> list[Path]:
    return [
        path
        for path in workspace.find_files(include, exclude)
        if not is_test_file(path, workspace.root)
    ]


def open_readable(workspace: Workspace, paths: Iterable[Path]) -> Iterator[DocumentSnapshot]:
    """Open each path lazily, skipping files that cannot be read as UTF-8."""
    for path in paths:
        try:
            snapshot = workspace.open_document(path)
        except (OSError, UnicodeDecodeError):
            continue
        yield snapshot


ConfirmFn = Callable[[str, str, str], "str | None"]
NotifyFn = Callable[[str], None]


def _decline(message: str, accept_label: str, cancel_label: str) -> str | None:
    return cancel_label


def _ignore(message: str) -> None:
    return None


def replace_text(path: Path, text: str) -> None:
    """Write ``text`` to a sibling temp file, then move it over ``path``."""
    handle = tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
    )
    try:
        with handle:
            handle.write(text)
        os.replace(handle.name, path)
    except OSError:
        Path(handle.name).unlink(missing_ok=True)
        raise


class StaleSnapshotError(RuntimeError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"File changed since it was scanned: {path}")
        self.path = path


class FileSystemWorkspace:
    """Workspace backed by files on disk.

    ``apply_edit`` re-reads every target before writing and refuses the whole
    edit set when any file no longer matches the snapshot its offsets were
    computed against. A write that fails part way restores the files already
    replaced from their snapshots.
    """

    def __init__(
        self,
        root: Path,
        *,
        confirm: ConfirmFn | None = None,
        notify: NotifyFn | None = None,
    ) -> None:
        self.root = root
        self._confirm = confirm or _decline
        self._notify = notify or _ignore
        self.last_error: str | None = None

    def find_files(self, include: str, exclude: str) -> list[Path]:
        return discover_files(self.root, include, exclude)

    def open_document(self, path: Path) -> DocumentSnapshot:
        return DocumentSnapshot(path=path, text=path.read_text(encoding="utf-8"))

    def ask(self, message: str, accept_label: str, cancel_label: str) -> str | None:
        return self._confirm(message, accept_label, cancel_label)

    def notify(self, message: str) -> None:
        self._notify(message)

    def apply_edit(self, plan: EditPlan) -> bool:
        self.last_error = None
        try:
            updated = self._render(plan)
        except (OSError, UnicodeDecodeError, StaleSnapshotError) as exc:
            self.last_error = str(exc)
            return False
        written: list[FileEditPlan] = []
        try:
            for file_plan, text in updated:
                replace_text(file_plan.path, text)
                written.append(file_plan)
        except OSError as exc:
            self.last_error = "; ".join([str(exc), *self._restore(written)])
            return False
        return True

    def _render(self, plan: EditPlan) -> list[tuple[FileEditPlan, str]]:
        updated: list[tuple[FileEditPlan, str]] = []
        for file_plan in plan.files:
            current = file_plan.path.read_text(encoding="utf-8")
            if DocumentSnapshot(file_plan.path, current).digest != file_plan.snapshot.digest:
                raise StaleSnapshotError(file_plan.path)
            updated.append((file_plan, file_plan.apply()))
        return updated

    def _restore(self, written: list[FileEditPlan]) -> list[str]:
        failures: list[str] = []
        for file_plan in reversed(written):
            try:
                replace_text(file_plan.path, file_plan.snapshot.text)
            except OSError as exc:
                failures.append(f"could not restore {file_plan.path}: {exc}")
        return failures
