from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class EntryKind(str, Enum):
    FILE = 'file'
    DIRECTORY = 'directory'


class ReturnType(str, Enum):
    FILES = 'files'
    DIRECTORIES = 'directories'
    ALL = 'all'

    @property
    def includes_files(self) -> bool:
        return self in (ReturnType.FILES, ReturnType.ALL)

    @property
    def includes_directories(self) -> bool:
        return self in (ReturnType.DIRECTORIES, ReturnType.ALL)


@dataclass(frozen=True)
class Entry:
    kind: EntryKind
    name: str
    uri: str
    created_at: datetime
    modified_at: datetime
    size_bytes: int
    writable: bool
    children: tuple[Entry, ...] = ()

    def __post_init__(self):
        if self.kind is EntryKind.FILE and self.children:
            raise ValueError('File entries cannot have children')


@dataclass(frozen=True)
class ListingOptions:
    recursive: bool = False
    file_filter: frozenset[str] = field(default_factory=frozenset)
    return_type: ReturnType = ReturnType.ALL
