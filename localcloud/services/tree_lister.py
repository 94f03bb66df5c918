from __future__ import annotations

import os
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

from ..models import Entry, EntryKind, ListingOptions, ReturnType
from .errors import InvalidTarget, translate_os_error
from .path_guard import PathGuard

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_listing_options(
    recursive: Optional[str],
    file_filters: Optional[str],
    return_type: Optional[str],
) -> ListingOptions:
    """Build listing options from the raw `recursive`, `file-filters` and `return-type` headers."""
    try:
        kind = ReturnType(return_type or 'all')
    except ValueError as exc:
        raise InvalidTarget(f'Unknown return-type: {return_type}') from exc
    extensions = frozenset(ext.strip() for ext in (file_filters or '').split(';') if ext.strip())
    return ListingOptions(recursive=recursive == 'true', file_filter=extensions, return_type=kind)


def extension(name: str) -> str:
    # Everything from the last dot on, so '.bashrc' has extension '.bashrc'.
    dot = name.rfind('.')
    return name[dot:] if dot >= 0 else ''


def list_dir(
    guard: PathGuard,
    path: Path,
    recursive: bool,
    file_filter: Iterable[str],
    return_type: ReturnType,
) -> list[Entry]:
    """List the children of an already validated directory.

    Entries come back in the order the directory read yields them. Symbolic
    links are described by their own metadata and never descended into. Any
    failure, at this level or deeper in the recursion, aborts the whole call.
    """
    allowed = file_filter if isinstance(file_filter, (set, frozenset)) else frozenset(file_filter)
    try:
        with os.scandir(path) as it:
            children = list(it)
    except OSError as exc:
        raise translate_os_error(exc) from exc

    entries: list[Entry] = []
    for child in children:
        child_path = Path(path) / child.name
        try:
            is_dir = child.is_dir(follow_symlinks=False)
        except OSError as exc:
            raise translate_os_error(exc) from exc

        if is_dir:
            if not return_type.includes_directories:
                continue
            nested: tuple[Entry, ...] = ()
            if recursive:
                nested = tuple(list_dir(guard, child_path, recursive, allowed, return_type))
            entries.append(_build_entry(guard, child_path, _lstat(child), EntryKind.DIRECTORY, nested))
        elif return_type.includes_files and extension(child.name) in allowed:
            entries.append(_build_entry(guard, child_path, _lstat(child), EntryKind.FILE))
    return entries


def list_tree(guard: PathGuard, path: Path, options: ListingOptions) -> Entry:
    """Describe `path` itself with its listing attached as children."""
    children = list_dir(guard, path, options.recursive, options.file_filter, options.return_type)
    node = describe(guard, path)
    if node.kind is not EntryKind.DIRECTORY:
        raise InvalidTarget('Not a directory')
    return Entry(
        kind=node.kind,
        name=node.name,
        uri=node.uri,
        created_at=node.created_at,
        modified_at=node.modified_at,
        size_bytes=node.size_bytes,
        writable=node.writable,
        children=tuple(children),
    )


def describe(guard: PathGuard, path: Path) -> Entry:
    try:
        st = os.stat(path)
    except OSError as exc:
        raise translate_os_error(exc) from exc
    kind = EntryKind.DIRECTORY if stat.S_ISDIR(st.st_mode) else EntryKind.FILE
    return _build_entry(guard, path, st, kind)


def _lstat(child: os.DirEntry) -> os.stat_result:
    try:
        return child.stat(follow_symlinks=False)
    except OSError as exc:
        raise translate_os_error(exc) from exc


def _build_entry(
    guard: PathGuard,
    path: Path,
    st: os.stat_result,
    kind: EntryKind,
    children: tuple[Entry, ...] = (),
) -> Entry:
    modified = _from_ns(st.st_mtime_ns)
    birth = getattr(st, 'st_birthtime', None)
    created = _from_ns(int(birth * 1_000_000_000)) if birth else modified
    return Entry(
        kind=kind,
        name=path.name,
        uri=guard.to_uri(path),
        created_at=created,
        modified_at=modified,
        size_bytes=st.st_size,
        writable=os.access(path, os.W_OK),
        children=children,
    )


def _from_ns(value: int) -> datetime:
    return _EPOCH + timedelta(microseconds=value // 1000)
