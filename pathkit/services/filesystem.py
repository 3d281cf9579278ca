from __future__ import annotations

import errno
import os
import posixpath
import stat as stat_mod
import time
from dataclasses import dataclass, field
from typing import Protocol

from ..config import settings


@dataclass(frozen=True)
class FileInfo:
    name: str
    is_dir: bool
    is_symlink: bool = False
    size: int = 0
    mtime: int = 0


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_dir: bool

    @property
    def is_hidden(self) -> bool:
        return self.hidden_under(settings.hidden_prefix)

    def hidden_under(self, prefix: str) -> bool:
        return bool(prefix) and self.name.startswith(prefix)


class FileSystem(Protocol):
    def stat(self, path: str) -> FileInfo:
        ...

    def lstat(self, path: str) -> FileInfo:
        ...

    def read_dir(self, path: str) -> list[DirEntry]:
        ...

    def eval_symlinks(self, path: str) -> str:
        ...


def _info_from_stat(path: str, st: os.stat_result) -> FileInfo:
    return FileInfo(
        name=os.path.basename(os.path.normpath(path)),
        is_dir=stat_mod.S_ISDIR(st.st_mode),
        is_symlink=stat_mod.S_ISLNK(st.st_mode),
        size=st.st_size,
        mtime=int(st.st_mtime),
    )


class OsFileSystem:
    def stat(self, path: str) -> FileInfo:
        return _info_from_stat(path, os.stat(path))

    def lstat(self, path: str) -> FileInfo:
        return _info_from_stat(path, os.lstat(path))

    def read_dir(self, path: str) -> list[DirEntry]:
        with os.scandir(path) as it:
            entries = [DirEntry(name=entry.name, is_dir=entry.is_dir(follow_symlinks=False)) for entry in it]
        entries.sort(key=lambda e: e.name)
        return entries

    def eval_symlinks(self, path: str) -> str:
        return os.path.realpath(path, strict=True)


@dataclass
class _Node:
    is_dir: bool
    data: bytes = b''
    target: str | None = None
    mtime: int = field(default_factory=lambda: int(time.time()))


class MemoryFileSystem:
    """In-memory filesystem with POSIX-style paths.

    ``stat`` reports the node itself and never follows symlinks, the way a
    non-OS filesystem without a symlink-aware query behaves. ``eval_symlinks``
    follows chains to an absolute path.
    """

    _MAX_LINK_HOPS = 40

    def __init__(self):
        self._nodes: dict[str, _Node] = {'/': _Node(is_dir=True)}
        self.calls: list[dict] = []

    @staticmethod
    def _key(path: str) -> str:
        return posixpath.normpath(posixpath.join('/', path))

    def _ensure_parents(self, key: str) -> None:
        parent = posixpath.dirname(key)
        missing: list[str] = []
        while parent not in self._nodes:
            missing.append(parent)
            parent = posixpath.dirname(parent)
        if not self._nodes[parent].is_dir:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), parent)
        for path in missing:
            self._nodes[path] = _Node(is_dir=True)

    def add_dir(self, path: str) -> None:
        key = self._key(path)
        self._ensure_parents(key)
        self._nodes[key] = _Node(is_dir=True)

    def add_file(self, path: str, data: bytes = b'') -> None:
        key = self._key(path)
        self._ensure_parents(key)
        self._nodes[key] = _Node(is_dir=False, data=data)

    def add_symlink(self, path: str, target: str) -> None:
        key = self._key(path)
        self._ensure_parents(key)
        self._nodes[key] = _Node(is_dir=False, target=target)

    def _lookup(self, path: str) -> tuple[str, _Node]:
        key = self._key(path)
        node = self._nodes.get(key)
        if node is None:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)
        return key, node

    def _info(self, key: str, node: _Node) -> FileInfo:
        return FileInfo(
            name=posixpath.basename(key) or '/',
            is_dir=node.is_dir,
            is_symlink=node.target is not None,
            size=len(node.data),
            mtime=node.mtime,
        )

    def stat(self, path: str) -> FileInfo:
        self.calls.append({'op': 'stat', 'path': path})
        return self._info(*self._lookup(path))

    def lstat(self, path: str) -> FileInfo:
        self.calls.append({'op': 'lstat', 'path': path})
        return self._info(*self._lookup(path))

    def read_dir(self, path: str) -> list[DirEntry]:
        self.calls.append({'op': 'read_dir', 'path': path})
        key, node = self._lookup(path)
        if not node.is_dir:
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)

        entries = [
            DirEntry(name=posixpath.basename(child), is_dir=child_node.is_dir)
            for child, child_node in self._nodes.items()
            if child != key and posixpath.dirname(child) == key
        ]
        entries.sort(key=lambda e: e.name)
        return entries

    def eval_symlinks(self, path: str) -> str:
        self.calls.append({'op': 'eval_symlinks', 'path': path})
        key, node = self._lookup(path)
        hops = 0
        while node.target is not None:
            hops += 1
            if hops > self._MAX_LINK_HOPS:
                raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), path)
            key = self._key(posixpath.join(posixpath.dirname(key), node.target))
            node = self._nodes.get(key)
            if node is None:
                raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), key)
        return key
