import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from .config import Settings
from .exceptions import (
    EmptyUploadError,
    MissingUploadError,
    UnsupportedMediaError,
    UploadError,
    UploadTooLargeError,
)
from .mp3stream import count_frames

logger = logging.getLogger(__name__)

MP3_CONTENT_TYPES = {"audio/mpeg", "audio/mp3"}


def is_mp3_upload(content_type: Optional[str], filename: Optional[str]) -> bool:
    if content_type in MP3_CONTENT_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".mp3")


async def read_upload(file: UploadFile, limit: int) -> bytes:
    """Read the whole upload, refusing anything over ``limit`` bytes."""
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise UploadTooLargeError(limit)
    return data


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="mp3scan")

    @app.exception_handler(UploadError)
    async def upload_error(request: Request, exc: UploadError):
        logger.error("Error: %s", exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/file-upload")
    async def file_upload(request: Request):
        # text fields and non-multipart bodies fall through to MissingUploadError
        async with request.form() as form:
            file = form.get("file")
            if not isinstance(file, UploadFile):
                raise MissingUploadError("file")
            if not is_mp3_upload(file.content_type, file.filename):
                raise UnsupportedMediaError()
            data = await read_upload(file, settings.max_upload_bytes)
        if len(data) == 0:
            raise EmptyUploadError()

        frame_count = count_frames(data)
        logger.info("Counted %d frames in %s (%d bytes)", frame_count, file.filename, len(data))
        return {"frameCount": frame_count}

    return app
