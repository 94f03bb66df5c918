from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, Request, Response
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from ..deps import get_file_ops, header_enabled, http_error
from ..logger import get_logger
from ..schemas import FileInfoOut
from ..services.errors import CloudError

router = APIRouter(prefix='/file', tags=['files'])
ops = get_file_ops()
logger = get_logger(__name__)


@router.get('/{path:path}')
def read_file(
    path: str,
    if_modified_since: Optional[str] = Header(default=None),
    check_existence_only: Optional[str] = Header(default=None),
    get_file_info: Optional[str] = Header(default=None),
):
    try:
        target = ops.resolve(path)
        if header_enabled(if_modified_since):
            modified = ops.modified_since(target, if_modified_since)
            return Response(status_code=200 if modified else 304)
        if check_existence_only == 'true':
            return Response(status_code=204 if ops.exists(target) else 404)
        if header_enabled(get_file_info):
            return FileInfoOut.from_entry(ops.info(target))
        return FileResponse(ops.read_file_target(target))
    except CloudError as exc:
        raise http_error(exc)


@router.post('/{path:path}', status_code=201)
async def create_file(path: str, request: Request):
    try:
        target = ops.resolve(path)
        content = await request.body()
        await run_in_threadpool(ops.write_file, target, content, False)
    except CloudError as exc:
        raise http_error(exc)

    logger.info('file_created', path=str(target), size=len(content))
    return Response(status_code=201)


@router.put('/{path:path}', status_code=204)
async def update_file(
    path: str,
    request: Request,
    source_uri: Optional[str] = Header(default=None, alias='sourceURI'),
    overwrite_destination: Optional[str] = Header(default=None),
    delete_source: Optional[str] = Header(default=None),
):
    try:
        target = ops.resolve(path)
        if not source_uri:
            content = await request.body()
            await run_in_threadpool(ops.write_file, target, content, True)
            logger.info('file_updated', path=str(target), size=len(content))
            return Response(status_code=204)

        source = ops.resolve(source_uri)
        overwrite = overwrite_destination == 'true'
        if delete_source == 'true':
            await run_in_threadpool(ops.move_file, source, target, overwrite)
            logger.info('file_moved', source=str(source), path=str(target))
        else:
            await run_in_threadpool(ops.copy_file, source, target, overwrite)
            logger.info('file_copied', source=str(source), path=str(target))
    except CloudError as exc:
        raise http_error(exc)
    return Response(status_code=204)


@router.delete('/{path:path}', status_code=204)
def delete_file(path: str):
    try:
        target = ops.resolve(path)
        ops.remove_file(target)
    except CloudError as exc:
        raise http_error(exc)

    logger.info('file_removed', path=str(target))
    return Response(status_code=204)
