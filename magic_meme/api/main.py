"""FastAPI application entrypoint for Magic Meme Maker."""

from __future__ import annotations

from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request

from magic_meme.core.config import get_settings
from magic_meme.core.logger import bind_request_context, clear_request_context, get_logger
from magic_meme.media.client import get_generation_client
from magic_meme.media.router import router as meme_router


settings = get_settings()
logger = get_logger("magic_meme.api")

app = FastAPI(title=settings.app_name, version=settings.app_version)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    started_at = perf_counter()
    request_id = request.headers.get("x-request-id", str(uuid4()))
    bind_request_context(request_id=request_id)

    status_code = 500
    try:
        response = await call_next(request)
        status_code = int(response.status_code)
    finally:
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_seconds=round(perf_counter() - started_at, 4),
        )
        clear_request_context()

    response.headers["x-request-id"] = request_id
    return response


@app.on_event("startup")
def on_startup() -> None:
    # Builds the provider; a missing API_KEY raises ConfigError and aborts startup.
    client = get_generation_client()
    logger.info(
        "application_startup",
        env=settings.env,
        version=settings.app_version,
        image_provider=client.provider_name,
        generation_timeout_seconds=client.timeout_seconds,
    )


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.env}


@app.get("/version")
def version() -> dict[str, str]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "env": settings.env,
    }


app.include_router(meme_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
