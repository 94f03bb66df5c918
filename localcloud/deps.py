from __future__ import annotations

from typing import Optional

from fastapi import HTTPException

from .config import settings
from .logger import get_logger
from .services.errors import CloudError
from .services.file_ops import FileOps

logger = get_logger(__name__)

_DISABLED_VALUES = {'', 'false', 'none'}


def get_file_ops() -> FileOps:
    return FileOps(settings.cloud_root)


def header_enabled(value: Optional[str]) -> bool:
    return value is not None and value not in _DISABLED_VALUES


def http_error(exc: CloudError) -> HTTPException:
    logger.info('request_refused', status=exc.status_code, reason=str(exc), error=type(exc).__name__)
    return HTTPException(status_code=exc.status_code, detail=str(exc))
