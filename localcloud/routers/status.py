from __future__ import annotations

from fastapi import APIRouter

from ..config import settings
from ..deps import get_file_ops
from ..schemas import CloudStatus

router = APIRouter(tags=['status'])
ops = get_file_ops()


@router.get('/cloudstatus')
def cloud_status():
    status = CloudStatus(name=settings.app_name, version=settings.app_version, server_root=str(ops.root))
    return status.model_dump(by_alias=True)
