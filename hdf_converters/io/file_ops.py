"""
File operations module.

Reads converter inputs with encoding fallback and writes HDF output
atomically: data goes to a temporary file in the target directory, which
then replaces the target in one step.
"""

from __future__ import annotations

import codecs
import json
import os
import tempfile
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import Any, Generator, IO, Optional, Union

from hdf_converters.core.constants import ENCODINGS, MAX_FILE_SIZE
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import FileError

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


class FO:
    """Safe file operations with atomic writes and encoding detection."""

    @staticmethod
    @contextmanager
    def atomic(target: Union[str, Path], enc: str = "utf-8") -> Generator[IO, None, None]:
        """Atomic text file write.

        Args:
            target: Target file path (parent directories are created)
            enc: Encoding of the written text

        Yields:
            File handle for writing

        Raises:
            FileError: If the write or the final replace fails
        """
        target = Path(target).expanduser()
        tmp_path: Optional[Path] = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=str(target.parent),
                prefix=f".hdf_tmp_{os.getpid()}_",
                suffix=".tmp",
                text=True,
            )
            tmp_path = Path(tmp_name)

            # os.fdopen() keeps the descriptor from mkstemp, no reopen race
            with os.fdopen(fd, "w", encoding=enc, newline="\n") as fh:
                yield fh
                fh.flush()
                os.fsync(fh.fileno())

            tmp_path.replace(target)
            tmp_path = None
        except OSError as exc:
            raise FileError(f"Atomic write failed: {exc}", {"path": str(target)}) from exc
        finally:
            if tmp_path is not None and tmp_path.exists():
                with suppress(OSError):
                    tmp_path.unlink()

    @staticmethod
    def read(path: Union[str, Path]) -> str:
        """Read a text file, trying each known encoding.

        Args:
            path: File path to read

        Returns:
            File contents without a byte order mark

        Raises:
            FileError: If the file is missing, too large, or cannot be decoded
        """
        path = Path(path).expanduser()
        try:
            if not path.is_file():
                raise FileError("File not found", {"path": str(path)})
            size = path.stat().st_size
            if size > MAX_FILE_SIZE:
                raise FileError("File too large", {"path": str(path), "size": size})
            raw = path.read_bytes()
        except OSError as exc:
            raise FileError(f"Cannot read file: {exc}", {"path": str(path)}) from exc

        for encoding in ENCODINGS:
            # UTF-16 without a BOM decodes almost anything, so require one
            if encoding == "utf-16" and not raw.startswith(_UTF16_BOMS):
                continue
            try:
                data = raw.decode(encoding)
            except UnicodeError:
                continue
            if data.startswith("\ufeff"):
                data = data[1:]
            LOG.d(f"Read {path} ({size} bytes, {encoding})")
            return data

        raise FileError("Unable to decode file with any known encoding", {"path": str(path)})

    @staticmethod
    def write_json(path: Union[str, Path], data: Any, indent: Optional[int] = 2) -> Path:
        """Serialize data as JSON and write it atomically.

        Returns:
            The written path
        """
        path = Path(path).expanduser()
        try:
            text = json.dumps(data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise FileError(f"Cannot serialize JSON: {exc}", {"path": str(path)}) from exc
        with FO.atomic(path) as fh:
            fh.write(text)
            fh.write("\n")
        LOG.d(f"Wrote {path}")
        return path
