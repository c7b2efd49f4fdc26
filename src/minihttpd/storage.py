"""
=============================================================================
FILE STORAGE
=============================================================================

The filesystem capability behind /files/<name>: read a file by name,
write a file by name, both relative to one base directory.

=============================================================================
SECURITY: STAYING INSIDE THE BASE DIRECTORY
=============================================================================

Route handlers only ever pass the last path segment, so a name cannot
contain "/". It can still be ".." or an absolute-looking oddity, so every
name is resolved and checked:

    full_path = (base / name).resolve()
    full_path.relative_to(base)      # ValueError → PermissionError

A name containing a NUL byte is refused the same way before it reaches
the filesystem.

Callers treat PermissionError like any other OSError: 404 on read,
500 on write.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)


class FileStorage:
    """
    Reads and writes whole files under a base directory.

    All failures surface as OSError subclasses:
        FileNotFoundError   - no such file
        IsADirectoryError   - name points at a directory
        PermissionError     - OS refusal, or name escapes the base directory
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def path_for(self, name: str) -> Path:
        """
        Absolute path for `name`.

        Raises:
            PermissionError: The name contains a NUL byte, or the resolved
                             path is outside the base directory.
        """
        # The OS cannot represent NUL in a path; pathlib raises ValueError
        if "\x00" in name:
            raise PermissionError(f"Invalid file name: {name!r}")

        base = self.directory.resolve()
        full_path = (base / name).resolve()
        try:
            full_path.relative_to(base)
        except ValueError:
            raise PermissionError(f"Path escapes base directory: {name!r}") from None
        if full_path == base:
            raise IsADirectoryError(f"Not a file: {name!r}")
        return full_path

    def read(self, name: str) -> bytes:
        """Return the file's bytes."""
        return self.path_for(name).read_bytes()

    def write(self, name: str, data: bytes) -> int:
        """
        Create or overwrite the file with `data`.

        Returns:
            Number of bytes written.
        """
        path = self.path_for(name)
        path.write_bytes(data)
        logger.debug(f"Wrote {len(data)} bytes to {path}")
        return len(data)
