from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from propsync import cli
from propsync.schema import SyncRequest

PLACEHOLDER = "{/* TODO: completar */}"
CARD_SOURCE = (
    "export function Card({ title, onClick }) {\n"
    "  return null;\n"
    "}\n"
    'export const Page = () => <Card title="x" />;\n'
)


def test_scan_prints_definitions_and_usages(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(CARD_SOURCE, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["scan", str(source)])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload["language_id"] == "typescriptreact"
    assert payload["definitions"] == [{"name": "Card", "props": ["title", "onClick"]}]
    assert payload["usages"] == [{"component_name": "Card", "props": ["title"]}]


def test_scan_rejects_unsupported_files(tmp_path: Path) -> None:
    notes = tmp_path / "notes.txt"
    notes.write_text("<Card title='x' />", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["scan", str(notes)])
    assert result.exit_code != 0


def test_sync_with_yes_applies_edits(tmp_path: Path) -> None:
    source = tmp_path / "src" / "Card.tsx"
    source.parent.mkdir()
    source.write_text(CARD_SOURCE, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--root", str(tmp_path), "--yes"])
    assert result.exit_code == 0
    assert "<Card> definition_to_usages: applied" in result.output
    assert f"onClick={PLACEHOLDER}" in source.read_text(encoding="utf-8")


def test_sync_dry_run_reports_without_writing(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(CARD_SOURCE, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--root", str(tmp_path), "--dry-run"])
    assert result.exit_code == 0
    assert "<Card> definition_to_usages: declined" in result.output
    assert f"Card.tsx:4:43: onClick={PLACEHOLDER}" in result.output
    assert source.read_text(encoding="utf-8") == CARD_SOURCE


def test_sync_interactive_confirmation(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(CARD_SOURCE, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--root", str(tmp_path)], input="y\n")
    assert result.exit_code == 0
    assert f"onClick={PLACEHOLDER}" in source.read_text(encoding="utf-8")


def test_sync_rejects_yes_with_dry_run(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(CARD_SOURCE, encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--yes", "--dry-run"])
    assert result.exit_code != 0


def test_sync_json_for_files_already_in_sync(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(
        "export function Card({ title }) {}\nexport const Page = () => <Card title=\"x\" />;\n",
        encoding="utf-8",
    )
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--root", str(tmp_path), "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert [item["status"] for item in payload["passes"]] == ["no_changes", "in_sync"]
    assert payload["errors"] == []


def test_sync_reports_unsupported_language(tmp_path: Path) -> None:
    source = tmp_path / "notes.md"
    source.write_text("<Card title='x' />", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli.app, ["sync", str(source), "--root", str(tmp_path)])
    assert result.exit_code == 0
    assert "unsupported language" in result.output


def test_run_sync_reports_apply_failures(tmp_path: Path) -> None:
    source = tmp_path / "Card.tsx"
    source.write_text(CARD_SOURCE, encoding="utf-8")

    def _confirm(message: str, accept_label: str, cancel_label: str) -> str:
        source.write_text(CARD_SOURCE + "\n", encoding="utf-8")
        return accept_label

    response = cli.run_sync(
        SyncRequest(path=str(source), root=str(tmp_path)),
        confirm=_confirm,
        notify=lambda message: None,
    )
    assert response.passes[0].status == "apply_failed"
    assert response.errors and "changed since it was scanned" in response.errors[0]
    lines = cli.render_sync_response(response)
    assert lines[-1].startswith("error: ")
