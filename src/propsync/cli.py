from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional
import json

import typer

from propsync.config import sync_settings
from propsync.scan.registry import language_for_path, scanner_for_language
from propsync.schema import (
    SyncRequest,
    SyncResponse,
    save_outcome_to_response,
    scan_to_response,
)
from propsync.sync.engine import SyncEngine
from propsync.sync.model import SaveEvent, SyncStatus
from propsync.sync.workspace import FileSystemWorkspace

app = typer.Typer(add_completion=False)

ConfirmFn = Callable[[str, str, str], Optional[str]]


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"File not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read {path}: {exc}") from exc


def _resolve_language(path: Path, language: Optional[str]) -> str:
    if language:
        return language.strip().lower()
    return language_for_path(path) or ""


def _notify(message: str) -> None:
    typer.echo(message, err=True)


def build_confirm(*, assume_yes: bool, dry_run: bool) -> ConfirmFn:
    def _confirm(message: str, accept_label: str, cancel_label: str) -> Optional[str]:
        if dry_run:
            typer.echo(f"DRY RUN: {message}", err=True)
            return cancel_label
        if assume_yes:
            typer.echo(message, err=True)
            return accept_label
        return accept_label if typer.confirm(message, default=False) else cancel_label

    return _confirm


def run_sync(
    request: SyncRequest,
    *,
    config: Optional[Path] = None,
    confirm: Optional[ConfirmFn] = None,
    notify: Optional[Callable[[str], None]] = None,
) -> SyncResponse:
    path = Path(request.path)
    root = Path(request.root) if request.root else Path.cwd()
    text = _read_source(path)
    settings = sync_settings(root=root, config_path=config)
    workspace = FileSystemWorkspace(
        root,
        confirm=confirm
        or build_confirm(assume_yes=request.assume_yes, dry_run=request.dry_run),
        notify=notify or _notify,
    )
    engine = SyncEngine(workspace, settings=settings)
    outcome = engine.on_save(
        SaveEvent(
            path=path,
            language_id=_resolve_language(path, request.language_id),
            text=text,
        )
    )
    errors: list[str] = []
    if any(item.status is SyncStatus.APPLY_FAILED for item in outcome.passes):
        errors.append(workspace.last_error or "Edit could not be applied.")
    return save_outcome_to_response(outcome, errors=errors)


def render_sync_response(response: SyncResponse) -> list[str]:
    if response.skipped:
        return [f"{response.path}: unsupported language, nothing to sync."]
    if not response.passes:
        return [f"{response.path}: no components or usages to sync."]
    lines: list[str] = []
    for item in response.passes:
        summary = f"<{item.component}> {item.direction}: {item.status}"
        if item.added_props:
            summary += f" (+{', '.join(item.added_props)})"
        lines.append(summary)
        for edit in item.edits:
            line, col = edit.start
            lines.append(f"  {edit.path}:{line + 1}:{col + 1}: {edit.replacement.strip()}")
    lines.extend(f"error: {message}" for message in response.errors)
    return lines


@app.command("scan")
def scan(
    path: Path = typer.Argument(..., help="Source file to scan."),
    language: Optional[str] = typer.Option(None, "--language", help="Editor language id."),
) -> None:
    """Print component definitions and JSX usages found in a file as JSON."""
    language_id = _resolve_language(path, language)
    scanner = scanner_for_language(language_id)
    if scanner is None:
        raise typer.BadParameter(f"Unsupported language for {path}: {language_id or 'unknown'}")
    text = _read_source(path)
    response = scan_to_response(
        str(path),
        language_id,
        scanner.extract_definitions(text),
        scanner.extract_usages(text),
    )
    typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))


@app.command("sync")
def sync(
    path: Path = typer.Argument(..., help="File to treat as just saved."),
    root: Optional[Path] = typer.Option(None, "--root", help="Workspace root (defaults to cwd)."),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to propsync.toml."),
    language: Optional[str] = typer.Option(None, "--language", help="Editor language id."),
    assume_yes: bool = typer.Option(False, "--yes", "-y", help="Accept every confirmation."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show planned edits without writing."),
    as_json: bool = typer.Option(False, "--json", help="Emit the sync response as JSON."),
) -> None:
    """Run prop synchronization as if PATH had just been saved in the editor."""
    if assume_yes and dry_run:
        raise typer.BadParameter("Use --yes or --dry-run, not both.")
    request = SyncRequest(
        path=str(path),
        language_id=language,
        root=str(root) if root is not None else None,
        assume_yes=assume_yes,
        dry_run=dry_run,
    )
    response = run_sync(request, config=config)
    if as_json:
        typer.echo(json.dumps(response.model_dump(), indent=2, sort_keys=True))
    else:
        for line in render_sync_response(response):
            typer.echo(line)
    if response.errors:
        raise typer.Exit(code=1)


@app.command("lsp")
def lsp() -> None:
    """Start the propsync language server on stdio."""
    from propsync.server import start

    start()


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
