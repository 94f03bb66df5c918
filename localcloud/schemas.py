from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, ConfigDict, Field

from .models import Entry

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_millis(value: datetime) -> str:
    return str((value - _EPOCH) // timedelta(milliseconds=1))


class EntryOut(BaseModel):
    type: str
    name: str
    uri: str
    creationdate: str = ''
    modifieddate: str = ''
    size: str = ''
    writable: str = ''
    children: list[EntryOut] = Field(default_factory=list)

    @classmethod
    def from_entry(cls, entry: Entry) -> EntryOut:
        return cls(
            type=entry.kind.value,
            name=entry.name,
            uri=entry.uri,
            creationdate=to_millis(entry.created_at),
            modifieddate=to_millis(entry.modified_at),
            size=str(entry.size_bytes),
            writable='true' if entry.writable else 'false',
            children=[cls.from_entry(child) for child in entry.children],
        )


class FileInfoOut(BaseModel):
    creationDate: str
    modifiedDate: str
    size: str
    readOnly: str

    @classmethod
    def from_entry(cls, entry: Entry) -> FileInfoOut:
        return cls(
            creationDate=to_millis(entry.created_at),
            modifiedDate=to_millis(entry.modified_at),
            size=str(entry.size_bytes),
            readOnly='false' if entry.writable else 'true',
        )


class CloudStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    version: str
    server_root: str = Field(alias='server-root')
    status: str = 'running'
