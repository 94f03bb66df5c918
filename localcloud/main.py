from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .logger import get_logger, setup_logging
from .routers import directories, files, status

setup_logging()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name, version=settings.app_version)


def _parse_cors_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(',') if origin.strip()]


cors_origins = _parse_cors_origins(settings.cors_origins)
if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        allow_headers=[
            'Content-Type',
            'sourceURI',
            'overwrite-destination',
            'delete-source',
            'operation',
            'If-modified-since',
            'check-existence-only',
            'get-file-info',
            'recursive',
            'file-filters',
            'return-type',
        ],
    )


@app.middleware('http')
async def request_logging_middleware(request: Request, call_next):
    started = time.monotonic()
    response = await call_next(request)
    logger.info(
        'request_handled',
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=round((time.monotonic() - started) * 1000, 2),
    )
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error('unhandled_error', method=request.method, path=request.url.path, error=type(exc).__name__)
    return JSONResponse({'detail': 'Internal server error. Please try again.'}, status_code=500)


app.add_exception_handler(Exception, unhandled_exception_handler)


@app.on_event('startup')
def startup():
    root = files.ops.root
    root.mkdir(parents=True, exist_ok=True)
    logger.info(
        'cloud_starting',
        name=settings.app_name,
        version=settings.app_version,
        host=settings.app_host,
        port=settings.app_port,
        root=str(root),
    )


app.include_router(files.router)
app.include_router(directories.router)
app.include_router(status.router)
