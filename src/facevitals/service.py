"""FastAPI service computing vital signs from an uploaded rPPG signal.

A client that already runs face tracking (e.g. in the browser) POSTs the
per-frame forehead green means to ``/vitals`` and receives the same results
the offline video pipeline would produce.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field, field_validator

from .config import AnalysisConfig
from .errors import AnalysisError
from .models import SignalPoint
from .pipeline import process_signal

logger = logging.getLogger(__name__)


class PointModel(BaseModel):
    t: float = Field(..., ge=0.0)  # ms
    v: float


class SignalModel(BaseModel):
    points: list[PointModel]
    fps: Optional[float] = Field(None, gt=0.0, le=120.0)

    @field_validator("points")
    @classmethod
    def _increasing(cls, pts: list[PointModel]) -> list[PointModel]:
        for a, b in zip(pts, pts[1:]):
            if b.t <= a.t:
                raise ValueError("timestamps must be strictly increasing")
        return pts


class VitalsModel(BaseModel):
    heartRate: Optional[int] = None
    respiratoryRate: Optional[int] = None
    sdnn: Optional[int] = None
    rmssd: Optional[int] = None


def make_app(cfg: Optional[AnalysisConfig] = None) -> FastAPI:
    app = FastAPI(title="facevitals", version="0.2.0")
    base_cfg = cfg or AnalysisConfig()

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/vitals", response_model=VitalsModel)
    def post_vitals(payload: SignalModel) -> VitalsModel:
        run_cfg = replace(base_cfg, previews=False)
        if payload.fps is not None:
            run_cfg = replace(run_cfg, fps=payload.fps)
        signal = [SignalPoint(t=p.t, v=p.v) for p in payload.points]
        try:
            results = process_signal(signal, cfg=run_cfg)
        except AnalysisError as exc:
            logger.info("Rejected signal of %d points: %s", len(signal), exc.kind)
            raise HTTPException(
                status_code=422,
                detail={"error": exc.kind, "message": exc.message},
            ) from exc
        return VitalsModel(**results.to_dict())

    return app


app = make_app()


def main() -> None:  # pragma: no cover - manual run helper
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":  # pragma: no cover
    main()
