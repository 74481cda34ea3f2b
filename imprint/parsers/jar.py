"""
JAR Archive Reader
===================

Enumerates the class entries of a JAR (zip) archive as fully
materialised, immutable byte buffers.

Only entries whose name carries the class file suffix are yielded, in
archive order.  Each :class:`JarEntry` owns its bytes and is parsed on
demand; parsing never mutates the entry and can be repeated.
"""

from __future__ import annotations

import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO, Iterator, Union

from imprint.core.errors import ArchiveError
from imprint.core.models import ClassFile
from imprint.parsers.class_parser import parse_class


@dataclass(frozen=True, slots=True)
class JarEntry:
    """One class file read from an archive.

    Attributes:
        name: Entry path inside the archive (``a/b/C.class``).
        data: Complete entry contents.
    """

    name: str
    data: bytes

    def parse(self) -> ClassFile:
        """Parse this entry as a class file, including method bytecode."""
        return parse_class(self.data, parse_bytecode=True)

    def parse_without_bytecode(self) -> ClassFile:
        """Parse this entry as a class file, skipping method bytecode."""
        return parse_class(self.data, parse_bytecode=False)

    def __repr__(self) -> str:
        return f"JarEntry(name={self.name!r}, size={len(self.data)})"


class JarArchive:
    """A JAR archive opened for class enumeration.

    Usage::

        with JarArchive("app.jar") as jar:
            for entry in jar.classes():
                print(entry.name)

    Args:
        source: Path of the archive, or a seekable binary file object.
        class_suffix: Entry name suffix that marks a class file.
        max_entry_size: Entries larger than this many bytes (uncompressed)
            raise :class:`ArchiveError`; ``0`` disables the limit.

    Raises:
        ArchiveError: The source is not a readable zip archive.
        OSError: The path cannot be opened.
    """

    def __init__(
        self,
        source: Union[str, Path, IO[bytes]],
        *,
        class_suffix: str = ".class",
        max_entry_size: int = 0,
    ) -> None:
        try:
            self._zip = zipfile.ZipFile(source, "r")
        except zipfile.BadZipFile as exc:
            raise ArchiveError(f"archive error: {exc}") from exc
        self._class_suffix = class_suffix
        self._max_entry_size = max_entry_size

    # ------------------------------------------------------------------ #
    #  Enumeration
    # ------------------------------------------------------------------ #

    def class_names(self) -> list[str]:
        """Names of all class entries, in archive order."""
        return [info.filename for info in self._class_infos()]

    def classes(self) -> Iterator[JarEntry]:
        """Yield every class entry, reading each one to completion."""
        for info in self._class_infos():
            yield self._read(info)

    def __iter__(self) -> Iterator[JarEntry]:
        return self.classes()

    def _class_infos(self) -> Iterator[zipfile.ZipInfo]:
        for info in self._zip.infolist():
            if info.is_dir():
                continue
            if PurePosixPath(info.filename).suffix == self._class_suffix:
                yield info

    def _read(self, info: zipfile.ZipInfo) -> JarEntry:
        if self._max_entry_size and info.file_size > self._max_entry_size:
            raise ArchiveError(
                f"archive error: entry {info.filename} is {info.file_size} bytes "
                f"(limit {self._max_entry_size})"
            )
        # RuntimeError is raised for encrypted entries
        try:
            data = self._zip.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as exc:
            raise ArchiveError(f"archive error: {info.filename}: {exc}") from exc
        return JarEntry(name=info.filename, data=data)

    # ------------------------------------------------------------------ #
    #  Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> JarArchive:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
