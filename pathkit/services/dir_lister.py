from __future__ import annotations

import logging
from typing import Iterable

from ..config import settings
from ..errors import StatError, SymlinkReadError
from .filesystem import DirEntry, FileInfo, FileSystem, OsFileSystem

logger = logging.getLogger(__name__)


def lstat_if_os(fs: FileSystem, path: str) -> FileInfo:
    # Only the real OS filesystem is trusted to answer lstat.
    if isinstance(fs, OsFileSystem):
        return fs.lstat(path)
    return fs.stat(path)


def real_file_info(fs: FileSystem, path: str) -> tuple[FileInfo, str]:
    try:
        info = lstat_if_os(fs, path)
    except OSError as exc:
        raise StatError(path, str(exc)) from exc

    if not info.is_symlink:
        return info, path

    try:
        link = fs.eval_symlinks(path)
    except OSError as exc:
        raise SymlinkReadError(path, str(exc)) from exc

    try:
        info = lstat_if_os(fs, link)
    except OSError as exc:
        raise StatError(link, str(exc)) from exc

    logger.debug('Resolved symlink %s -> %s', path, link)
    return info, link


def resolve_real_path(fs: FileSystem, path: str) -> str:
    _, real_path = real_file_info(fs, path)
    return real_path


def _visible(entries: Iterable[DirEntry], hidden_prefix: str | None) -> list[DirEntry]:
    prefix = settings.hidden_prefix if hidden_prefix is None else hidden_prefix
    return [entry for entry in entries if not entry.hidden_under(prefix)]


def list_directory_names(entries: Iterable[DirEntry], hidden_prefix: str | None = None) -> list[str]:
    return [entry.name for entry in _visible(entries, hidden_prefix) if entry.is_dir]


def list_file_names(entries: Iterable[DirEntry], hidden_prefix: str | None = None) -> list[str]:
    return [entry.name for entry in _visible(entries, hidden_prefix) if not entry.is_dir]


def read_directory_names(fs: FileSystem, path: str) -> list[str]:
    return list_directory_names(fs.read_dir(path))


def read_file_names(fs: FileSystem, path: str) -> list[str]:
    return list_file_names(fs.read_dir(path))
