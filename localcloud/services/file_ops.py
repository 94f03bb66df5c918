from __future__ import annotations

import os
import shutil
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path

from ..models import Entry, EntryKind, ListingOptions
from .errors import AlreadyExists, InvalidTarget, NotFound, OutOfBounds, translate_os_error
from .path_guard import PathGuard
from .tree_lister import describe, list_tree

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FileOps:
    """Filesystem operations behind the /file and /directory resources.

    Every path a method receives has already been through `resolve`.
    """

    def __init__(self, root: str):
        self.guard = PathGuard(root)

    @property
    def root(self) -> Path:
        return self.guard.root

    def resolve(self, fragment: str) -> Path:
        return self.guard.resolve(fragment)

    def exists(self, target: Path) -> bool:
        # Follows symlinks like `info`, so a dangling link does not exist.
        return os.path.exists(target)

    def modified_since(self, target: Path, since: str) -> bool:
        """Compare against milliseconds since the epoch or an HTTP-date.

        HTTP-dates only carry whole seconds, so the modification time is
        truncated before comparing. An unparseable value counts as not
        modified.
        """
        modified_at = self.info(target).modified_at
        if since.isascii() and since.isdigit():
            try:
                return modified_at > _EPOCH + timedelta(milliseconds=int(since))
            except (ValueError, OverflowError):
                return False
        try:
            instant = parsedate_to_datetime(since)
        except (TypeError, ValueError):
            return False
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return modified_at.replace(microsecond=0) > instant

    def info(self, target: Path) -> Entry:
        return describe(self.guard, target)

    def list_dir(self, target: Path, options: ListingOptions) -> Entry:
        return list_tree(self.guard, target, options)

    def read_file_target(self, target: Path) -> Path:
        if self.info(target).kind is not EntryKind.FILE:
            raise InvalidTarget('Not a file')
        return target

    def write_file(self, target: Path, content: bytes, overwrite: bool):
        mode = 'r+b' if overwrite else 'xb'
        if overwrite and target.is_dir():
            raise InvalidTarget('Not a file')
        try:
            with target.open(mode) as f:
                f.write(content)
                f.truncate()
                f.flush()
                os.fsync(f.fileno())
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def remove_file(self, target: Path):
        if target.is_dir() and not target.is_symlink():
            raise InvalidTarget('Not a file')
        try:
            target.unlink(missing_ok=False)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def copy_file(self, source: Path, dest: Path, overwrite: bool = False):
        self._prepare_file_dest(source, dest, overwrite)
        try:
            shutil.copy(source, dest)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def move_file(self, source: Path, dest: Path, overwrite: bool = False):
        self._prepare_file_dest(source, dest, overwrite)
        self._refuse_root(source)
        try:
            os.replace(source, dest)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def create_dir(self, target: Path):
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def remove_dir(self, target: Path):
        self._refuse_root(target)
        if not self.exists(target):
            raise NotFound('Directory not found')
        if not target.is_dir() or target.is_symlink():
            raise InvalidTarget('Not a directory')
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def copy_dir(self, source: Path, dest: Path):
        self._prepare_dir_dest(source, dest)
        try:
            shutil.copytree(source, dest, symlinks=True)
        except shutil.Error as exc:
            raise InvalidTarget('Directory copy incomplete') from exc
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def move_dir(self, source: Path, dest: Path):
        self._prepare_dir_dest(source, dest)
        self._refuse_root(source)
        try:
            os.rename(source, dest)
        except OSError as exc:
            raise translate_os_error(exc) from exc

    def _prepare_file_dest(self, source: Path, dest: Path, overwrite: bool):
        self._refuse_root(dest)
        if not self.exists(source):
            raise NotFound('Source not found')
        if source.is_dir():
            raise InvalidTarget('Source is not a file')
        if source == dest:
            raise InvalidTarget('Source and destination are the same')
        if self._occupied(dest):
            if not overwrite:
                raise AlreadyExists('Destination exists')
            self.remove_file(dest)

    def _prepare_dir_dest(self, source: Path, dest: Path):
        self._refuse_root(dest)
        if self._occupied(dest):
            raise AlreadyExists('Destination exists')
        if not self.exists(source):
            raise NotFound('Source not found')
        if not source.is_dir():
            raise InvalidTarget('Source is not a directory')
        if source in dest.parents:
            raise InvalidTarget('Destination is inside the source directory')

    def _occupied(self, target: Path) -> bool:
        return os.path.lexists(target)

    def _refuse_root(self, target: Path):
        if self.guard.is_root(target):
            raise OutOfBounds('Refusing to modify the cloud root')
