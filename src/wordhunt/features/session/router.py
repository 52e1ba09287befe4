from __future__ import annotations

import json

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, model_validator

from ...core.models import DEFAULT_ROUND_SIZE
from ...exceptions import PoolLoadError, StaleRoundError
from .schemas import BoardResponse, SelectResult
from .service import SessionConfig, SessionManager

__all__ = ["CreateSessionRequest", "SelectRequest", "create_session_router"]

_HX_HEADER = "HX-Request"
_LOAD_ERROR_MESSAGE = "Error Loading Game"


class CreateSessionRequest(BaseModel):
    round_size: int | None = None
    seed: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: dict[str, object]) -> dict[str, object]:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for field in ("round_size", "seed"):
            value = cleaned.get(field)
            if value in (None, ""):
                cleaned[field] = None
                continue
            if isinstance(value, str):
                try:
                    cleaned[field] = int(value)
                except ValueError:
                    cleaned[field] = None
        return cleaned

    @model_validator(mode="after")
    def _normalize(self) -> CreateSessionRequest:
        size = self.round_size if self.round_size is not None else DEFAULT_ROUND_SIZE
        self.round_size = min(max(size, 1), DEFAULT_ROUND_SIZE)
        return self


class SelectRequest(BaseModel):
    slot: int
    round: str | None = None


class _SessionController:
    def __init__(self, manager: SessionManager, templates: Jinja2Templates) -> None:
        self.manager = manager
        self.templates = templates

    # ------------------------------------------------------------------ helpers
    def _is_hx(self, request: Request) -> bool:
        return request.headers.get(_HX_HEADER, "").lower() == "true"

    def _json_response(self, data: dict[str, object], status_code: int = 200) -> JSONResponse:
        response = JSONResponse(data, status_code=status_code)
        response.headers.setdefault("Vary", _HX_HEADER)
        return response

    def _template_response(
        self,
        request: Request,
        template: str,
        context: dict[str, object],
        *,
        trigger: dict[str, object] | None = None,
        status_code: int = 200,
    ) -> Response:
        headers: dict[str, str] = {"Vary": _HX_HEADER}
        if trigger:
            headers["HX-Trigger"] = json.dumps(trigger)
        return self.templates.TemplateResponse(
            request,
            template,
            {**context, "request": request},
            status_code=status_code,
            headers=headers,
        )

    def _board_fragment(
        self,
        request: Request,
        sid: str,
        board: BoardResponse,
        *,
        trigger: dict[str, object] | None = None,
    ) -> Response:
        return self._template_response(request, "session/board.html", {"board": board, "sid": sid}, trigger=trigger)

    def _select_fragment(self, request: Request, sid: str, result: SelectResult) -> Response:
        context: dict[str, object] = {"feedback": result.feedback, "board": result.board, "sid": sid}
        # The board swaps in place; feedback lands out of band in the page's #hx-feedback.
        trigger: dict[str, object] = {"roundUpdated": sid}
        if result.feedback.cues:
            trigger["cuesQueued"] = {
                "round": result.board.round_id,
                "cues": [cue.to_dict() for cue in result.feedback.cues],
            }
        return self._template_response(request, "session/select.html", context, trigger=trigger)

    def _load_error(self, request: Request, exc: PoolLoadError) -> Response:
        if self._is_hx(request):
            return self._template_response(
                request,
                "session/error.html",
                {"message": _LOAD_ERROR_MESSAGE, "detail": str(exc)},
                status_code=503,
            )
        return self._json_response({"error": _LOAD_ERROR_MESSAGE, "detail": str(exc)}, status_code=503)

    # ------------------------------------------------------------------ actions
    async def create(self, request: Request, body: CreateSessionRequest) -> Response:
        try:
            session_id = await self.manager.create_session_async(
                SessionConfig(round_size=body.round_size, seed=body.seed)
            )
        except PoolLoadError as exc:
            return self._load_error(request, exc)
        if self._is_hx(request):
            board = await self.manager.get_board_async(session_id)
            return self._board_fragment(request, session_id, board, trigger={"sessionCreated": session_id})
        return self._json_response({"session": session_id})

    async def board(self, request: Request, sid: str) -> Response:
        try:
            board = await self.manager.get_board_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        if self._is_hx(request):
            return self._board_fragment(request, sid, board)
        return self._json_response(board.to_dict())

    async def select(self, request: Request, sid: str, body: SelectRequest) -> Response:
        try:
            result = await self.manager.select_async(sid, body.slot, body.round)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except StaleRoundError as exc:
            raise HTTPException(409, str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(400, str(exc)) from exc
        if self._is_hx(request):
            return self._select_fragment(request, sid, result)
        return self._json_response(result.to_dict())

    async def reset(self, request: Request, sid: str) -> Response:
        try:
            board = await self.manager.reset_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        except PoolLoadError as exc:
            return self._load_error(request, exc)
        if self._is_hx(request):
            return self._board_fragment(request, sid, board, trigger={"roundReset": sid})
        return self._json_response(board.to_dict())

    async def summary(self, request: Request, sid: str) -> Response:
        try:
            summary = await self.manager.summary_async(sid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        if self._is_hx(request):
            return self._template_response(request, "session/summary.html", {"summary": summary})
        return self._json_response(summary.to_dict())


def create_session_router(manager: SessionManager, templates: Jinja2Templates) -> APIRouter:
    controller = _SessionController(manager, templates)

    router = APIRouter(prefix="/api/v1/session", tags=["session"])

    @router.post("")
    async def create_session(request: Request, body: CreateSessionRequest) -> Response:
        return await controller.create(request, body)

    @router.get("/{sid}/board")
    async def get_board(request: Request, sid: str) -> Response:
        return await controller.board(request, sid)

    @router.post("/{sid}/select")
    async def post_select(request: Request, sid: str, body: SelectRequest) -> Response:
        return await controller.select(request, sid, body)

    @router.post("/{sid}/reset")
    async def post_reset(request: Request, sid: str) -> Response:
        return await controller.reset(request, sid)

    @router.get("/{sid}/summary")
    async def get_summary(request: Request, sid: str) -> Response:
        return await controller.summary(request, sid)

    return router
