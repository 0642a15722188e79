"""HTTP service: upload files for cleaning, download cleaned data."""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import uvicorn
from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from datasift.config import get_settings
from datasift.decoders import DecodeError
from datasift.pipeline import process_upload
from datasift.utils.file_io import (
    CSV_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    to_csv_bytes,
    to_xlsx_bytes,
)
from datasift.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "csv": (to_csv_bytes, CSV_CONTENT_TYPE),
    "xlsx": (to_xlsx_bytes, XLSX_CONTENT_TYPE),
}


class DownloadRequest(BaseModel):
    """Cleaned rows posted back for export."""

    data: list[dict[str, Any]] = Field(default_factory=list)
    include_status: bool = False


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load settings once at startup; bad configuration fails fast."""
    app.state.settings = get_settings()
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="datasift",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.post("/upload")
    async def upload(request: Request, file: UploadFile = File(...)):
        settings = request.app.state.settings
        content = await file.read(settings.max_upload_bytes + 1)
        if len(content) > settings.max_upload_bytes:
            raise HTTPException(status_code=413, detail="Upload too large")

        file_name = file.filename or ""
        try:
            result = await run_in_threadpool(
                process_upload, file_name, content, settings=settings
            )
        except DecodeError as e:
            logger.warning(f"Rejected upload {file_name}: {e}")
            return JSONResponse(
                status_code=400,
                content={"success": False, "error": str(e)},
            )

        return result.to_dict()

    @app.post("/download/{export_format}")
    def download(export_format: str, body: DownloadRequest) -> Response:
        if export_format not in EXPORT_FORMATS:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported format: {export_format}",
            )

        serialize, content_type = EXPORT_FORMATS[export_format]
        payload = serialize(body.data, include_status=body.include_status)

        return Response(
            content=payload,
            media_type=content_type,
            headers={
                "Content-Disposition": f'attachment; filename="cleaned_data.{export_format}"'
            },
        )

    return app


def main():
    """Serve the application with uvicorn."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=True)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
