"""POST /api/render: CLA text + base64 matrix → GIF similarity image."""

from __future__ import annotations

import base64
import binascii
import io
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from simmat.engine.config import RenderConfig
from simmat.engine.errors import SimMatError
from simmat.engine.pipeline import create_pipeline
from simmat.models.requests import RenderRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/render", response_class=Response)
async def render(req: RenderRequest) -> Response:
    try:
        matrix = base64.b64decode(req.matrix, validate=True)
    except (binascii.Error, ValueError) as e:
        raise HTTPException(status_code=422, detail=f"matrix is not valid base64: {e}") from e

    config = RenderConfig.from_settings()
    config.full_names = config.full_names or req.full_names
    pipeline = create_pipeline(config)

    try:
        benchmark = pipeline.load_bytes(req.categories, matrix)
        result = pipeline.render(benchmark, distance=req.distance, paper=req.paper)
    except SimMatError as e:
        logger.warning("Render failed: %s", e)
        raise HTTPException(status_code=422, detail=str(e)) from e

    buf = io.BytesIO()
    result.image.save(buf, format="GIF")
    return Response(
        content=buf.getvalue(),
        media_type="image/gif",
        headers={
            "X-Grid-Size": str(result.grid.size),
            "X-Render-Seconds": f"{result.elapsed_s:.3f}",
        },
    )
