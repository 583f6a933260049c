"""Whole-file load and save for buffers."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Union

from modal_engine.runtime import telemetry

PathLike = Union[str, Path]


class BufferIOError(RuntimeError):
    """Raised when a buffer cannot be written to disk."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def split_lines(text: str) -> List[str]:
    return text.splitlines() or [""]


def load_lines(path: PathLike) -> List[str]:
    """Read ``path`` as UTF-8 lines.

    A missing or unreadable file yields a single empty line so the caller can
    still edit and later create it.
    """

    target = Path(path)
    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        telemetry.record_event(
            "buffer.load_failed",
            level="warning",
            data={"path": str(target), "error": str(exc)},
        )
        return [""]
    return split_lines(text)


def save_lines(path: PathLike, lines: Sequence[str]) -> int:
    """Write ``lines`` joined by ``\\n``; return the number of bytes written."""

    target = Path(path)
    payload = "\n".join(lines)
    with telemetry.span(
        "buffer::save", component="buffer", metadata={"path": str(target)}
    ) as handle:
        try:
            target.write_text(payload, encoding="utf-8")
        except OSError as exc:
            handle.add_metadata("error", exc.strerror or str(exc))
            raise BufferIOError(f"Failed to write {target}: {exc}", path=target) from exc
    size = len(payload.encode("utf-8"))
    telemetry.record_event("buffer.saved", data={"path": str(target), "bytes": size})
    return size


__all__ = ["BufferIOError", "load_lines", "save_lines", "split_lines"]
