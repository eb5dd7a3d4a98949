"""
Conditional output writing.

Generated files are only rewritten when their content actually changes,
so a no-op regeneration does not touch timestamps and trigger downstream
rebuilds.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ...logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WriteOutcome:
    """What happened to an output file."""

    path: Path
    changed: bool
    size: int


def normalize_line_endings(text: str, line_ending: str = "\n") -> str:
    """Convert every line terminator in ``text`` to ``line_ending``."""
    unified = text.replace("\r\n", "\n")
    if line_ending == "\n":
        return unified
    return unified.replace("\n", line_ending)


def read_existing(path: Union[str, Path]) -> bytes:
    """Current file content; a missing file counts as empty."""
    try:
        return Path(path).read_bytes()
    except FileNotFoundError:
        return b""


def has_drift(path: Union[str, Path], content: bytes) -> bool:
    """Whether ``content`` differs from what is stored at ``path``."""
    return read_existing(path) != content


def write_if_changed(
    path: Union[str, Path], text: str, line_ending: str = "\n"
) -> WriteOutcome:
    """
    Write ``text`` to ``path`` unless the file already holds exactly that.

    Args:
        path: Output file
        text: Complete generated text (``\\n`` line endings)
        line_ending: Terminator to store on disk

    Returns:
        WriteOutcome describing whether the file was rewritten

    Raises:
        OSError: If the file cannot be read or written
    """
    path = Path(path)
    content = normalize_line_endings(text, line_ending).encode("utf-8")

    if not has_drift(path, content):
        logger.info("%s is up to date", path)
        return WriteOutcome(path=path, changed=False, size=len(content))

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info("Wrote %d bytes to %s", len(content), path)
    return WriteOutcome(path=path, changed=True, size=len(content))
