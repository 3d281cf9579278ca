from __future__ import annotations

import os

from ..errors import MissingBaseDirectoryError, RelativePathUnresolvableError

FILE_PATH_SEPARATOR = os.sep
_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


def _has_no_filename(path: str, base: str) -> bool:
    # Checked against the raw input, before any extension splitting.
    return (
        path.endswith(_SEPARATORS)
        or base in {'', '.', '..'}
        or base in _SEPARATORS
    )


def split_name_extension(path: str) -> tuple[str, str]:
    """Return ``(stem, extension)`` for the last segment of ``path``.

    The extension excludes its dot. Directory references (trailing separator,
    ``.``, ``..``, the root) have neither a stem nor an extension. A name whose
    only dot is the leading one, like ``.bashrc``, has no extension.
    """
    base = os.path.basename(path)
    if _has_no_filename(path, base):
        return '', ''

    name, dotted_ext = os.path.splitext(base)
    if not dotted_ext:
        return base, ''
    return name, dotted_ext[1:]


def stem(path: str) -> str:
    return split_name_extension(path)[0]


def extension(path: str) -> str:
    return split_name_extension(path)[1]


def replace_extension(path: str, new_ext: str) -> str:
    # A dot is appended even for an empty new_ext; callers rely on that shape.
    name = stem(path) + '.' + new_ext
    if path.endswith(_SEPARATORS):
        return path + name
    head = os.path.dirname(path)
    if not head:
        return name
    return os.path.join(head, name)


def _split_clean(path: str) -> list[str]:
    return [part for part in path.split(os.sep) if part and part != '.']


def _rel(base: str, target: str, raw_path: str, raw_base: str) -> str:
    base_drive, base_rest = os.path.splitdrive(base)
    target_drive, target_rest = os.path.splitdrive(target)
    if os.path.normcase(base_drive) != os.path.normcase(target_drive):
        raise RelativePathUnresolvableError(raw_path, raw_base, 'paths are on different volumes')
    if os.path.isabs(base_rest) != os.path.isabs(target_rest):
        raise RelativePathUnresolvableError(raw_path, raw_base)

    base_parts = _split_clean(base_rest)
    target_parts = _split_clean(target_rest)

    common = 0
    for b, t in zip(base_parts, target_parts):
        if os.path.normcase(b) != os.path.normcase(t):
            break
        common += 1

    remaining = base_parts[common:]
    if '..' in remaining:
        raise RelativePathUnresolvableError(raw_path, raw_base)

    parts = ['..'] * len(remaining) + target_parts[common:]
    if not parts:
        return '.'
    return os.sep.join(parts)


def relative_path(path: str, base: str) -> str:
    """Return ``path`` relative to ``base``.

    A trailing separator on ``path`` is kept on the result so directory
    references stay directory references.
    """
    if os.path.isabs(path) and base == '':
        raise MissingBaseDirectoryError(path)

    name = os.path.normpath(path)
    clean_base = os.path.normpath(base)
    rel = _rel(clean_base, name, path, base)

    native = path.replace('/', os.sep)
    if native.endswith(FILE_PATH_SEPARATOR) and not rel.endswith(FILE_PATH_SEPARATOR):
        rel += FILE_PATH_SEPARATOR
    return rel


def extract_root_segments(paths: list[str]) -> list[str]:
    """Return the first non-empty segment of each path, duplicates kept.

    ``/content/section/`` becomes ``content``.
    """
    roots: list[str] = []
    for raw in paths:
        sections = raw.replace(os.sep, '/').split('/')
        roots.append(next((section for section in sections if section), ''))
    return roots
