from __future__ import annotations

import errno


class CloudError(Exception):
    status_code = 500


class OutOfBounds(CloudError, PermissionError):
    status_code = 403


class NotFound(CloudError, FileNotFoundError):
    status_code = 404


class InvalidTarget(CloudError, ValueError):
    status_code = 400


class AlreadyExists(CloudError, FileExistsError):
    status_code = 400


class IOFailure(CloudError, OSError):
    status_code = 500


def translate_os_error(exc: OSError) -> CloudError:
    """Map an OS error onto the cloud error taxonomy."""
    if isinstance(exc, CloudError):
        return exc
    if isinstance(exc, FileNotFoundError):
        return NotFound('Not found')
    if isinstance(exc, FileExistsError):
        return AlreadyExists('Already exists')
    if isinstance(exc, (NotADirectoryError, IsADirectoryError)) or exc.errno == errno.ENOTEMPTY:
        return InvalidTarget('Invalid target')
    return IOFailure(exc.strerror or 'I/O failure')
