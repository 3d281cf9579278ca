from __future__ import annotations


class PathError(Exception):
    def __init__(self, path: str, cause: str = ''):
        self.path = path
        self.cause = cause
        super().__init__(self._format())

    def _format(self) -> str:
        if self.cause:
            return f"{self.path}: {self.cause}"
        return self.path


class MissingBaseDirectoryError(PathError, ValueError):
    def __init__(self, path: str):
        super().__init__(path, 'missing base directory')


class RelativePathUnresolvableError(PathError, ValueError):
    def __init__(self, path: str, base: str, cause: str = ''):
        self.base = base
        super().__init__(path, cause or f"can't make {path} relative to {base}")


class SymlinkReadError(PathError, OSError):
    def _format(self) -> str:
        return f"Cannot read symbolic link '{self.path}', error was: {self.cause}"


class StatError(PathError, OSError):
    def _format(self) -> str:
        return f"Cannot stat '{self.path}', error was: {self.cause}"
