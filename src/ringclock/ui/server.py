"""FastAPI backend for uploading a schedule and fetching the clock chart.

The server owns one :class:`~ringclock.schedule.state.ScheduleStore`.  An
upload replaces the served schedule only when it parses completely and no
newer upload has started; otherwise the previous schedule stays in place.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ringclock.core.config import ChartConfig
from ringclock.core.defaults import DEFAULT_CONFIG_DIR
from ringclock.core.time import format_minutes
from ringclock.core.validation import validate_schedule
from ringclock.render.export import activity_rows
from ringclock.render.svg import render_chart_svg
from ringclock.schedule.state import ScheduleStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class ActivityResponse(BaseModel):
    index: int
    name: str
    start: str
    end: str
    duration: int
    zone: str
    color: str


class ScheduleResponse(BaseModel):
    file_name: str
    generation: int
    activities: list[ActivityResponse]


class UploadResponse(BaseModel):
    status: str = Field(description="'loaded' or 'superseded'.")
    file_name: str
    count: int


class ChartConfigResponse(BaseModel):
    full_width: bool
    label_max_chars: int


class ChartConfigUpdateRequest(BaseModel):
    full_width: bool | None = None
    label_max_chars: int | None = None


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    *,
    config_dir: Path = Path(DEFAULT_CONFIG_DIR),
    store: ScheduleStore | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config_dir: Directory holding ``config.json``.
        store: Schedule cell to serve; a fresh empty one by default.
    """
    schedule = store or ScheduleStore()
    chart_config = ChartConfig(config_dir)

    app = FastAPI(
        title="ringclock",
        docs_url="/api/docs",
        openapi_url="/api/openapi.json",
    )

    # -- REST: schedule -------------------------------------------------------

    @app.post("/api/schedule")
    async def upload_schedule(file: UploadFile = File(...)) -> UploadResponse:
        file_name = file.filename or ""
        data = await file.read()
        try:
            snap = await schedule.load_bytes(data, file_name)
        except ValueError as exc:
            logger.info("Rejected upload file_name=%r: %s", file_name, exc)
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if snap is None:
            return UploadResponse(status="superseded", file_name=file_name, count=0)
        return UploadResponse(status="loaded", file_name=file_name, count=len(snap.activities))

    @app.get("/api/schedule")
    async def get_schedule() -> ScheduleResponse:
        snap = schedule.snapshot
        return ScheduleResponse(
            file_name=snap.file_name,
            generation=snap.generation,
            activities=[
                ActivityResponse(
                    index=a.index,
                    name=a.name,
                    start=format_minutes(a.start_minutes),
                    end=format_minutes(a.end_minutes),
                    duration=a.duration,
                    zone=a.zone.value,
                    color=a.color,
                )
                for a in snap.activities
            ],
        )

    @app.delete("/api/schedule")
    async def clear_schedule() -> dict[str, str]:
        schedule.clear()
        return {"status": "cleared"}

    @app.get("/api/schedule/geometry")
    async def schedule_geometry() -> list[dict[str, Any]]:
        return activity_rows(
            schedule.snapshot.activities,
            label_max_chars=chart_config.label_max_chars,
        )

    @app.get("/api/schedule/validation")
    async def schedule_validation() -> dict[str, Any]:
        report = validate_schedule(schedule.snapshot.activities)
        return report.model_dump(mode="json")

    # -- chart ----------------------------------------------------------------

    @app.get("/api/chart.svg")
    async def chart_svg(
        full_width: bool | None = Query(None),
        legend: bool = Query(True),
    ) -> Response:
        svg = render_chart_svg(
            schedule.snapshot.activities,
            full_width=chart_config.full_width if full_width is None else full_width,
            legend=legend,
            label_max_chars=chart_config.label_max_chars,
        )
        return Response(content=svg, media_type="image/svg+xml")

    # -- REST: config ---------------------------------------------------------

    @app.get("/api/config")
    async def get_config() -> ChartConfigResponse:
        return ChartConfigResponse(**chart_config.as_dict())

    @app.put("/api/config")
    async def update_config(body: ChartConfigUpdateRequest) -> ChartConfigResponse:
        patch = {k: v for k, v in body.model_dump().items() if v is not None}
        if patch:
            try:
                chart_config.update(patch)
            except ValueError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
        return ChartConfigResponse(**chart_config.as_dict())

    return app
