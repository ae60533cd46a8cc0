"""Session API routes - the UI collaborator's inbound commands.

Routes:
- GET  /v1/modes: selectable prompting modes
- PUT  /v1/mode: select the active mode
- POST /v1/submit: start a run with the active mode
- POST /v1/cancel: cancel the active run
- GET  /v1/output: current output panel text and controller state

Rejected submissions (blank question, no mode, model unavailable, busy)
surface through the registered exception handlers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from pydantic import BaseModel, Field

from reasoning_demo.core.constants import STATUS_CANCELED
from reasoning_demo.orchestration.strategy import SELECTABLE_MODES, Mode


if TYPE_CHECKING:
    from reasoning_demo.orchestration.strategy import StrategySelector
    from reasoning_demo.services.output_panel import OutputPanel
    from reasoning_demo.services.task_controller import TaskController


# =============================================================================
# Request / Response Models
# =============================================================================


class ModeInfo(BaseModel):
    """A prompting mode with its display texts."""

    mode: Mode
    label: str
    description: str

    @classmethod
    def from_mode(cls, mode: Mode) -> ModeInfo:
        return cls(mode=mode, label=mode.label, description=mode.description)


class ModesResponse(BaseModel):
    modes: list[ModeInfo]
    selected: ModeInfo


class SelectModeRequest(BaseModel):
    mode: Mode = Field(description="Mode to activate", examples=["self_consistency"])


class SubmitRequest(BaseModel):
    text: str = Field(description="The user's question", examples=["What is 2+2?"])


class SubmitResponse(BaseModel):
    run_id: str
    mode: Mode
    status: str


class CancelResponse(BaseModel):
    cancelled: bool
    status: str


class OutputResponse(BaseModel):
    state: str
    mode: Mode
    kind: str
    output: str


# =============================================================================
# State Accessors
# =============================================================================


def _selector(request: Request) -> StrategySelector:
    return request.app.state.selector


def _controller(request: Request) -> TaskController:
    return request.app.state.controller


def _panel(request: Request) -> OutputPanel:
    return request.app.state.panel


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["session"])


@router.get("/modes", response_model=ModesResponse, summary="List prompting modes")
async def list_modes(request: Request) -> ModesResponse:
    return ModesResponse(
        modes=[ModeInfo.from_mode(mode) for mode in SELECTABLE_MODES],
        selected=ModeInfo.from_mode(_selector(request).mode),
    )


@router.put("/mode", response_model=ModeInfo, summary="Select the active mode")
async def select_mode(body: SelectModeRequest, request: Request) -> ModeInfo:
    """Replace the active mode. A run already in flight keeps its own mode."""
    mode = _selector(request).select(body.mode)
    return ModeInfo.from_mode(mode)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Submit a question",
)
async def submit(body: SubmitRequest, request: Request) -> SubmitResponse:
    """Start a run with the currently selected mode.

    The run executes in the background; poll /v1/output for progress.
    """
    run = _controller(request).start(_selector(request).mode, body.text)
    return SubmitResponse(
        run_id=run.run_id,
        mode=run.mode,
        status=_panel(request).text,
    )


@router.post("/cancel", response_model=CancelResponse, summary="Cancel the active run")
async def cancel(request: Request) -> CancelResponse:
    cancelled = _controller(request).cancel()
    panel_text = STATUS_CANCELED if cancelled else _panel(request).text
    return CancelResponse(cancelled=cancelled, status=panel_text)


@router.get("/output", response_model=OutputResponse, summary="Current output")
async def output(request: Request) -> OutputResponse:
    panel = _panel(request)
    return OutputResponse(
        state=_controller(request).state.value,
        mode=_selector(request).mode,
        kind=panel.kind,
        output=panel.text,
    )
