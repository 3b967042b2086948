"""Compile Python style modules to CSS.

A style module is an ordinary Python file that builds one or more
``Stylesheet`` objects at import time. Compiling executes it in a fresh
namespace and concatenates the CSS of every stylesheet it leaves in its
globals.
"""

from __future__ import annotations

import fnmatch
import logging
import runpy
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

from .stylesheet import Stylesheet

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

DEFAULT_EXCLUDE: tuple[str, ...] = ("*/site-packages/*", "*/.venv/*", "*/node_modules/*")


class CompilerError(Exception):
    """Base class for errors raised while compiling a style module."""

    path: str

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class BuildError(CompilerError):
    """The style module could not be found or is not a file."""


class ExecutionError(CompilerError):
    """The style module raised while it was executed."""


class CompileOptions:
    __slots__ = ("cwd", "exclude", "include", "input_path")

    input_path: Path
    cwd: Path
    include: tuple[str, ...]
    exclude: tuple[str, ...]

    def __init__(
        self,
        input_path: str | Path,
        *,
        cwd: str | Path | None = None,
        include: Iterable[str] = (),
        exclude: Iterable[str] = DEFAULT_EXCLUDE,
    ) -> None:
        self.input_path = Path(input_path)
        self.cwd = Path(cwd) if cwd is not None else self.input_path.parent
        self.include = tuple(include)
        self.exclude = tuple(exclude)

    def __repr__(self) -> str:
        return f"CompileOptions({str(self.input_path)!r}, cwd={str(self.cwd)!r})"

    def accepts(self, path: str) -> bool:
        """Whether a dependency path passes the include and exclude patterns."""
        if self.include and not any(fnmatch.fnmatch(path, pattern) for pattern in self.include):
            return False
        return not any(fnmatch.fnmatch(path, pattern) for pattern in self.exclude)


class CompileResult:
    __slots__ = ("css", "dependencies", "duration")

    css: str
    dependencies: list[str]
    duration: float

    def __init__(self, css: str, dependencies: list[str], duration: float) -> None:
        self.css = css
        self.dependencies = dependencies
        self.duration = duration

    def __repr__(self) -> str:
        return f"<CompileResult {len(self.css)} chars, {len(self.dependencies)} dependencies>"


class BuildCache:
    """Compile results keyed by resolved input path.

    With ``max_size`` set, adding an entry beyond the limit evicts the
    oldest one.
    """

    __slots__ = ("_entries", "max_size")

    max_size: int | None

    def __init__(self, max_size: int | None = None) -> None:
        self._entries: dict[str, CompileResult] = {}
        self.max_size = max_size

    @staticmethod
    def _key(path: str | Path) -> str:
        return str(Path(path).resolve())

    def get(self, path: str | Path) -> CompileResult | None:
        return self._entries.get(self._key(path))

    def set(self, path: str | Path, result: CompileResult) -> None:
        key = self._key(path)
        self._entries.pop(key, None)
        self._entries[key] = result
        if self.max_size is not None:
            while len(self._entries) > self.max_size:
                del self._entries[next(iter(self._entries))]

    def invalidate(self, path: str | Path) -> bool:
        return self._entries.pop(self._key(path), None) is not None

    def invalidate_dependents(self, path: str | Path) -> list[str]:
        """Drop every entry built from ``path``; returns the dropped keys."""
        key = self._key(path)
        dropped = [
            entry for entry, result in self._entries.items() if entry == key or key in result.dependencies
        ]
        for entry in dropped:
            del self._entries[entry]
        return dropped

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self._key(path) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _is_relative_to(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


def _local_modules(names: Iterable[str], root: Path) -> dict[str, str]:
    """Map module names to resolved file paths for modules that live under root."""
    local: dict[str, str] = {}
    for name in names:
        # Never evict this package; style modules must share its classes
        if name == "surimi" or name.startswith("surimi."):
            continue
        module = sys.modules.get(name)
        filename = getattr(module, "__file__", None)
        if not filename:
            continue
        path = Path(filename).resolve()
        if _is_relative_to(path, root):
            local[name] = str(path)
    return local


def _find_stylesheets(namespace: dict[str, object]) -> list[Stylesheet]:
    found: list[Stylesheet] = []
    for value in namespace.values():
        if isinstance(value, Stylesheet) and all(value is not sheet for sheet in found):
            found.append(value)
    return found


def compile_file(options: CompileOptions, cache: BuildCache | None = None) -> CompileResult:
    """Execute the style module at ``options.input_path`` and return its CSS.

    Raises BuildError when the input cannot be read and ExecutionError when
    the module itself fails.
    """
    path = options.input_path.resolve()
    if not path.exists():
        raise BuildError(f"Style module not found: {path}", str(path))
    if not path.is_file():
        raise BuildError(f"Style module is not a file: {path}", str(path))

    if cache is not None:
        cached = cache.get(path)
        if cached is not None:
            logger.debug("Cache hit for %s", path)
            return cached
        logger.debug("Cache miss for %s", path)

    start = time.perf_counter()
    root = options.cwd.resolve()
    search_path = str(path.parent)
    loaded = set(sys.modules)

    # Sibling imports resolve the way they do for `python style.py`
    sys.path.insert(0, search_path)
    try:
        logger.debug("Executing style module %s", path)
        namespace = runpy.run_path(str(path), run_name="__surimi__")
    except Exception as e:
        raise ExecutionError(f"Error executing {path}: {e}", str(path)) from e
    finally:
        if search_path in sys.path:
            sys.path.remove(search_path)
        local = _local_modules(set(sys.modules) - loaded, root)
        for name in local:
            del sys.modules[name]

    dependencies = [str(path)]
    for name, filename in local.items():
        if filename != str(path) and filename not in dependencies and options.accepts(filename):
            logger.debug("Dependency %s (%s)", name, filename)
            dependencies.append(filename)

    css = "\n\n".join(sheet.build() for sheet in _find_stylesheets(namespace) if len(sheet))
    result = CompileResult(css, dependencies, time.perf_counter() - start)
    logger.debug("Compiled %s in %.3fs", path, result.duration)

    if cache is not None:
        cache.set(path, result)
    return result


def _snapshot(paths: Iterable[str]) -> dict[str, int | None]:
    mtimes: dict[str, int | None] = {}
    for path in paths:
        try:
            mtimes[path] = Path(path).stat().st_mtime_ns
        except OSError:
            mtimes[path] = None
    return mtimes


def watch(
    options: CompileOptions,
    on_change: Callable[[CompileResult], object],
    on_error: Callable[[CompilerError], object] | None = None,
    *,
    interval: float = 0.5,
    max_cycles: int | None = None,
    cache: BuildCache | None = None,
) -> None:
    """Compile, then recompile whenever the input or one of its dependencies changes.

    Polls modification times every ``interval`` seconds. Runs until
    interrupted, or for ``max_cycles`` polls when given.
    """
    if cache is None:
        cache = BuildCache()
    watched = [str(options.input_path.resolve())]

    def build() -> list[str]:
        nonlocal watched
        try:
            result = compile_file(options, cache)
        except CompilerError as e:
            logger.warning("Build failed: %s", e)
            if on_error is None:
                raise
            on_error(e)
            # Keep polling the last good build's files; the fix may land in any of them
            return watched
        on_change(result)
        watched = result.dependencies
        return watched

    mtimes = _snapshot(build())
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        time.sleep(interval)
        cycles += 1

        current = _snapshot(mtimes)
        changed = [path for path, mtime in current.items() if mtime != mtimes[path]]
        if not changed:
            continue

        for path in changed:
            logger.debug("Changed: %s", path)
            cache.invalidate_dependents(path)
        mtimes = _snapshot(build())
