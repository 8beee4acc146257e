"""Tab-separated export of iteration traces.

A trace file starts with the tolerance and a column header, followed by one
line per iteration and a final line written after the loop exits::

    epsilon:1e-05
    iteration	x	f(x)	∇f(x)
    0	[2.0, 2.0]	2.0	[4.0, 2.0]
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import IO, Iterator, Optional, Union

import numpy as np

from .core import DEFAULT_TRACE_DIR
from .utils import Point

COLUMNS = ("iteration", "x", "f(x)", "∇f(x)")


def trace_file_path(
    method_name: str,
    file_name: str = "",
    file_dir: Union[str, Path] = DEFAULT_TRACE_DIR,
    now: Optional[datetime] = None,
) -> Path:
    """Build ``<file_dir>/<method_name>_<file_name><YYYYmmddHHMM>.txt``."""
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M")
    return Path(file_dir or DEFAULT_TRACE_DIR) / f"{method_name}_{file_name}{stamp}.txt"


def format_value(value: object) -> str:
    """Render a scalar or vector for a trace column."""
    arr = np.asarray(value, dtype=float)
    if arr.ndim == 0:
        return repr(float(arr))
    return "[" + ", ".join(repr(float(v)) for v in arr.ravel()) + "]"


class TraceWriter:
    """Writes trace lines to an open text handle."""

    def __init__(self, handle: Optional[IO[str]], path: Optional[Path] = None) -> None:
        self._handle = handle
        self.path = path
        self.lines_written = 0

    @property
    def enabled(self) -> bool:
        return self._handle is not None

    @property
    def closed(self) -> bool:
        return self._handle is None or self._handle.closed

    def write_header(self, tol: float) -> None:
        if self._handle is None:
            return
        self._handle.write(f"epsilon:{tol}\n")
        self._handle.write("\t".join(COLUMNS) + "\n")

    def record(self, index: int, x: Point, fun: float, grad: Point) -> None:
        if self._handle is None:
            return
        self._handle.write(
            f"{index}\t{format_value(x)}\t{format_value(fun)}\t{format_value(grad)}\n"
        )
        self.lines_written += 1

    def close(self) -> None:
        if self._handle is not None and not self._handle.closed:
            self._handle.close()


@contextmanager
def open_trace(path: Optional[Path], tol: float) -> Iterator[TraceWriter]:
    """Open a trace for the duration of a run.

    With ``path=None`` a disabled writer is yielded and nothing touches the
    filesystem. Otherwise the file is created with its header and closed on
    every exit path.
    """
    if path is None:
        yield TraceWriter(None)
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    writer = TraceWriter(open(path, "w", encoding="utf-8"), path)
    try:
        writer.write_header(tol)
        yield writer
    finally:
        writer.close()


__all__ = ["COLUMNS", "TraceWriter", "format_value", "open_trace", "trace_file_path"]
