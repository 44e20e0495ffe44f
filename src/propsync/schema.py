from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel

from propsync.sync.model import EditPlan, PassOutcome, SaveOutcome
from propsync.scan.adapter_contract import ComponentDefinition, UsageSite


class SyncRequest(BaseModel):
    path: str
    language_id: Optional[str] = None
    root: Optional[str] = None
    assume_yes: bool = False
    dry_run: bool = False


class TextEditDTO(BaseModel):
    path: str
    start: Tuple[int, int]
    end: Tuple[int, int]
    replacement: str


class PassOutcomeDTO(BaseModel):
    component: str
    direction: str
    status: str
    added_props: List[str] = []
    edits: List[TextEditDTO] = []


class SyncResponse(BaseModel):
    path: str
    skipped: bool = False
    passes: List[PassOutcomeDTO] = []
    errors: List[str] = []


class ComponentDTO(BaseModel):
    name: str
    props: List[str]


class UsageDTO(BaseModel):
    component_name: str
    props: List[str]


class ScanResponse(BaseModel):
    path: str
    language_id: Optional[str] = None
    definitions: List[ComponentDTO] = []
    usages: List[UsageDTO] = []


def edits_to_dto(plan: EditPlan) -> list[TextEditDTO]:
    edits: list[TextEditDTO] = []
    for file_plan in plan.files:
        snapshot = file_plan.snapshot
        for edit in file_plan.text_edits():
            edits.append(
                TextEditDTO(
                    path=str(snapshot.path),
                    start=snapshot.position_at(edit.start),
                    end=snapshot.position_at(edit.end),
                    replacement=edit.text,
                )
            )
    return edits


def pass_to_dto(outcome: PassOutcome) -> PassOutcomeDTO:
    return PassOutcomeDTO(
        component=outcome.component,
        direction=outcome.direction.value,
        status=outcome.status.value,
        added_props=list(outcome.added_props),
        edits=edits_to_dto(outcome.plan),
    )


def save_outcome_to_response(outcome: SaveOutcome, *, errors: list[str] | None = None) -> SyncResponse:
    return SyncResponse(
        path=str(outcome.path),
        skipped=outcome.skipped,
        passes=[pass_to_dto(item) for item in outcome.passes],
        errors=list(errors or []),
    )


def scan_to_response(
    path: str,
    language_id: str | None,
    definitions: list[ComponentDefinition],
    usages: list[UsageSite],
) -> ScanResponse:
    return ScanResponse(
        path=path,
        language_id=language_id,
        definitions=[ComponentDTO(name=item.name, props=list(item.props)) for item in definitions],
        usages=[
            UsageDTO(component_name=item.component_name, props=list(item.props))
            for item in usages
        ],
    )
