from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Header, Response
from fastapi.responses import PlainTextResponse

from ..deps import get_file_ops, header_enabled, http_error
from ..logger import get_logger
from ..schemas import EntryOut
from ..services.errors import CloudError, InvalidTarget, NotFound
from ..services.tree_lister import parse_listing_options

router = APIRouter(prefix='/directory', tags=['directories'])
ops = get_file_ops()
logger = get_logger(__name__)


@router.get('/{path:path}')
def read_directory(
    path: str,
    if_modified_since: Optional[str] = Header(default=None),
    check_existence_only: Optional[str] = Header(default=None),
    recursive: Optional[str] = Header(default=None),
    file_filters: Optional[str] = Header(default=None),
    return_type: Optional[str] = Header(default=None),
):
    try:
        target = ops.resolve(path)
        if ops.guard.is_root(target):
            return PlainTextResponse(str(ops.root))
        if header_enabled(if_modified_since):
            if not ops.exists(target):
                raise NotFound('Directory not found')
            modified = ops.modified_since(target, if_modified_since)
            return Response(status_code=200 if modified else 304)
        if check_existence_only == 'true':
            return Response(status_code=204 if ops.exists(target) else 404)

        options = parse_listing_options(recursive, file_filters, return_type)
        tree = ops.list_dir(target, options)
    except CloudError as exc:
        raise http_error(exc)
    return EntryOut.from_entry(tree)


@router.post('/{path:path}', status_code=201)
def create_directory(path: str):
    try:
        target = ops.resolve(path)
        ops.create_dir(target)
    except CloudError as exc:
        raise http_error(exc)

    logger.info('directory_created', path=str(target))
    return Response(status_code=201)


@router.put('/{path:path}', status_code=204)
def copy_or_move_directory(
    path: str,
    source_uri: Optional[str] = Header(default=None, alias='sourceURI'),
    operation: Optional[str] = Header(default=None),
):
    try:
        target = ops.resolve(path)
        if not source_uri:
            raise InvalidTarget('sourceURI header is required')
        source = ops.resolve(source_uri)
        if operation == 'move':
            ops.move_dir(source, target)
        elif operation == 'copy':
            ops.copy_dir(source, target)
        else:
            raise InvalidTarget(f'Unknown operation: {operation}')
    except CloudError as exc:
        raise http_error(exc)

    event = 'directory_moved' if operation == 'move' else 'directory_copied'
    logger.info(event, source=str(source), path=str(target))
    return Response(status_code=204)


@router.delete('/{path:path}', status_code=204)
def delete_directory(path: str):
    try:
        target = ops.resolve(path)
        ops.remove_dir(target)
    except CloudError as exc:
        raise http_error(exc)

    logger.info('directory_removed', path=str(target))
    return Response(status_code=204)
