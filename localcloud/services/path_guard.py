from __future__ import annotations

import os
import posixpath
from pathlib import Path, PurePath

from .errors import InvalidTarget, OutOfBounds


class PathGuard:
    """Confines client supplied path fragments to a single root directory.

    Resolution is purely lexical. The root is made absolute once, here, and
    nothing afterwards touches the filesystem.
    """

    def __init__(self, root: str):
        self.root = Path(os.path.normpath(os.path.abspath(root)))

    def resolve(self, fragment: str) -> Path:
        if '\x00' in fragment:
            raise InvalidTarget('Invalid path')
        relative = fragment.lstrip('/')
        if relative:
            relative = posixpath.normpath(relative)
        candidate = Path(os.path.normpath(os.path.join(self.root, relative)))
        if not self.contains(candidate):
            raise OutOfBounds('Path outside cloud root')
        return candidate

    def contains(self, path: PurePath) -> bool:
        # Segment-wise: /srv/data-evil is not under /srv/data.
        return path == self.root or self.root in path.parents

    def is_root(self, path: PurePath) -> bool:
        return path == self.root

    def to_uri(self, path: PurePath) -> str:
        if not self.contains(path):
            raise OutOfBounds('Path outside cloud root')
        if self.is_root(path):
            return '/'
        return '/' + path.relative_to(self.root).as_posix()
