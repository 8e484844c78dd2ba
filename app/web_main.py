from __future__ import annotations

import logging
from dataclasses import dataclass

import orjson
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import ORJSONResponse, Response
from pydantic import ValidationError

from adapters.filesystem.json_utils import load_json_object
from app.config import AppSettings, load_settings
from app.drawio_wiring import build_converter
from domain.catalog import list_resources
from domain.errors import DiagramError
from domain.models import Architecture
from domain.services.convert_architecture_to_drawio import (
    ArchitectureToDrawioConverter,
    DrawioDocument,
)

logger = logging.getLogger(__name__)

DRAWIO_MEDIA_TYPE = "application/vnd.jgraph.mxfile"


@dataclass
class GeneratorContext:
    settings: AppSettings
    converter: ArchitectureToDrawioConverter


def create_app(settings: AppSettings) -> FastAPI:
    app = FastAPI(title=settings.web.title)
    context = GeneratorContext(settings=settings, converter=build_converter(settings.generator))

    def get_context() -> GeneratorContext:
        return context

    @app.get("/health")
    def health() -> ORJSONResponse:
        return ORJSONResponse({"status": "ok"})

    @app.get("/api/resources")
    def api_resources() -> ORJSONResponse:
        items = [
            {
                "type": resource_type,
                "name": definition.display_name,
                "category": definition.category,
                "icon": definition.icon,
                "width": definition.width,
                "height": definition.height,
            }
            for resource_type, definition in list_resources()
        ]
        return ORJSONResponse({"items": items})

    @app.post("/api/generate")
    async def api_generate(
        request: Request,
        context: GeneratorContext = Depends(get_context),
    ) -> ORJSONResponse:
        document = render_request(context, await request.body())
        return ORJSONResponse({"xml": document.to_xml(), "pages": len(document.pages)})

    @app.post("/api/generate/file")
    async def api_generate_file(
        request: Request,
        context: GeneratorContext = Depends(get_context),
    ) -> Response:
        document = render_request(context, await request.body())
        filename = document.pages[0].name if document.pages else "architecture"
        headers = {"Content-Disposition": f'attachment; filename="{safe_filename(filename)}.drawio"'}
        return Response(content=document.to_xml(), media_type=DRAWIO_MEDIA_TYPE, headers=headers)

    return app


def render_request(context: GeneratorContext, raw_bytes: bytes) -> DrawioDocument:
    if not raw_bytes:
        raise HTTPException(status_code=400, detail="Empty request body")
    try:
        payload = load_json_object(raw_bytes)
    except (orjson.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail="Invalid JSON") from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        architecture = Architecture.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422, detail=orjson.loads(exc.json(include_url=False))
        ) from exc
    try:
        return context.converter.convert(architecture)
    except DiagramError as exc:
        logger.exception("Diagram generation failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def safe_filename(value: str) -> str:
    cleaned = "".join(char if char.isalnum() or char in "-_" else "_" for char in value.strip())
    return cleaned.strip("_") or "architecture"


app = create_app(load_settings())
