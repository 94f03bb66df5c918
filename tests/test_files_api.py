from __future__ import annotations

import json

import pytest
from fastapi import HTTPException
from fastapi.responses import FileResponse
from starlette.requests import Request

from localcloud.routers import files
from localcloud.schemas import FileInfoOut
from localcloud.services.file_ops import FileOps


def _make_request(method: str, path: str, body: bytes = b'') -> Request:
    scope = {
        'type': 'http',
        'http_version': '1.1',
        'method': method,
        'scheme': 'http',
        'path': path,
        'raw_path': path.encode(),
        'query_string': b'',
        'headers': [],
        'client': ('127.0.0.1', 12345),
        'server': ('testserver', 80),
    }

    async def _receive():
        return {'type': 'http.request', 'body': body, 'more_body': False}

    return Request(scope, _receive)


@pytest.fixture
def cloud(tmp_path, monkeypatch):
    (tmp_path / 'notes.txt').write_text('hello')
    (tmp_path / 'docs').mkdir()
    monkeypatch.setattr(files, 'ops', FileOps(str(tmp_path)))
    return tmp_path


def _read(path: str, **headers):
    params = {'if_modified_since': None, 'check_existence_only': None, 'get_file_info': None}
    params.update(headers)
    return files.read_file(path, **params)


def test_read_file_returns_403_on_path_traversal(cloud):
    with pytest.raises(HTTPException) as exc:
        _read('../../etc/passwd')

    assert exc.value.status_code == 403


def test_read_file_serves_content(cloud):
    response = _read('notes.txt')

    assert isinstance(response, FileResponse)
    assert response.path == cloud / 'notes.txt'


def test_read_file_missing_or_directory(cloud):
    with pytest.raises(HTTPException) as missing:
        _read('nope.txt')
    with pytest.raises(HTTPException) as directory:
        _read('docs')

    assert missing.value.status_code == 404
    assert directory.value.status_code == 400


def test_check_existence_only(cloud):
    assert _read('notes.txt', check_existence_only='true').status_code == 204
    assert _read('nope.txt', check_existence_only='true').status_code == 404


def test_if_modified_since(cloud):
    assert _read('notes.txt', if_modified_since='0').status_code == 200
    assert _read('notes.txt', if_modified_since='99999999999999').status_code == 304
    # disabled values fall through to serving the file
    assert isinstance(_read('notes.txt', if_modified_since='none'), FileResponse)


def test_get_file_info_returns_string_fields(cloud):
    info = _read('notes.txt', get_file_info='true')

    assert isinstance(info, FileInfoOut)
    payload = json.loads(info.model_dump_json())
    assert set(payload) == {'creationDate', 'modifiedDate', 'size', 'readOnly'}
    assert payload['size'] == '5'
    assert payload['modifiedDate'].isdigit()


@pytest.mark.asyncio
async def test_create_file_writes_body(cloud):
    response = await files.create_file('docs/new.txt', _make_request('POST', '/file/docs/new.txt', b'content'))

    assert response.status_code == 201
    assert (cloud / 'docs' / 'new.txt').read_bytes() == b'content'


@pytest.mark.asyncio
async def test_create_file_refuses_existing(cloud):
    with pytest.raises(HTTPException) as exc:
        await files.create_file('notes.txt', _make_request('POST', '/file/notes.txt', b'x'))

    assert exc.value.status_code == 400
    assert (cloud / 'notes.txt').read_text() == 'hello'


@pytest.mark.asyncio
async def test_create_file_outside_root_is_refused_before_writing(cloud):
    with pytest.raises(HTTPException) as exc:
        await files.create_file('../escape.txt', _make_request('POST', '/file/../escape.txt', b'x'))

    assert exc.value.status_code == 403
    assert not (cloud.parent / 'escape.txt').exists()


@pytest.mark.asyncio
async def test_update_file_overwrites_existing(cloud):
    request = _make_request('PUT', '/file/notes.txt', b'bye')
    response = await files.update_file('notes.txt', request, None, None, None)

    assert response.status_code == 204
    assert (cloud / 'notes.txt').read_text() == 'bye'


@pytest.mark.asyncio
async def test_update_missing_file_is_404(cloud):
    request = _make_request('PUT', '/file/ghost.txt', b'bye')
    with pytest.raises(HTTPException) as exc:
        await files.update_file('ghost.txt', request, None, None, None)

    assert exc.value.status_code == 404


@pytest.mark.asyncio
async def test_update_file_copies_from_source_uri(cloud):
    request = _make_request('PUT', '/file/docs/copy.txt')
    await files.update_file('docs/copy.txt', request, '/notes.txt', None, None)

    assert (cloud / 'docs' / 'copy.txt').read_text() == 'hello'
    assert (cloud / 'notes.txt').exists()


@pytest.mark.asyncio
async def test_update_file_moves_when_delete_source(cloud):
    request = _make_request('PUT', '/file/docs/moved.txt')
    await files.update_file('docs/moved.txt', request, '/notes.txt', None, 'true')

    assert (cloud / 'docs' / 'moved.txt').read_text() == 'hello'
    assert not (cloud / 'notes.txt').exists()


@pytest.mark.asyncio
async def test_update_file_source_uri_is_confined(cloud):
    request = _make_request('PUT', '/file/stolen.txt')
    with pytest.raises(HTTPException) as exc:
        await files.update_file('stolen.txt', request, '../../etc/passwd', None, None)

    assert exc.value.status_code == 403
    assert not (cloud / 'stolen.txt').exists()


def test_delete_file(cloud):
    assert files.delete_file('notes.txt').status_code == 204
    assert not (cloud / 'notes.txt').exists()

    with pytest.raises(HTTPException) as exc:
        files.delete_file('notes.txt')
    assert exc.value.status_code == 404
