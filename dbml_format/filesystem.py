"""Loading and saving DBML documents on disk.

A `DocumentFile` is the unit the CLI works with: it is loaded once (path
checks, size limit, UTF-8 decode) and saved back only if the file on disk
still matches the snapshot taken at load time.
"""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .constants import DBML_EXTENSIONS, DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "DBML_FORMAT_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the size limit in bytes, read from `DBML_FORMAT_MAX_FILE_SIZE`.

    Raises:
        ValueError: If the variable is set to anything but a positive integer.
    """
    raw = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw is None:
        return default
    if not raw.strip().isdigit() or int(raw) == 0:
        raise ValueError(f"{MAX_FILE_SIZE_ENV_VAR} must be a positive integer, got {raw!r}.")
    return int(raw)


def resolve_document_path(raw_path: str, base_dir: Path) -> Path:
    """Turn a user-supplied path into the absolute path of a `.dbml` file.

    The path must name an existing regular file below `base_dir`, with a DBML
    extension, and no component of it may be a symlink.

    Raises:
        ValueError: Describing the first check that failed.

    Examples:
        resolve_document_path("schema/app.dbml", Path.cwd())
    """
    path = Path(raw_path).expanduser()
    linked = [part for part in (path, *path.parents) if _is_symlink(part)]
    if linked:
        raise ValueError(f"Symlinks are not supported for security reasons: {linked[0]}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in DBML_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a DBML file.\n"
            f"Supported extensions are: {', '.join(DBML_EXTENSIONS)}"
        )
    return resolved


def _is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def _snapshot(path: Path) -> os.stat_result:
    try:
        result = os.lstat(path)
    except OSError as error:
        raise IOError(f"Error accessing {path}: {error}") from error
    if stat.S_ISLNK(result.st_mode):
        raise IOError(f"Symlinks are not supported: {path}.")
    if not stat.S_ISREG(result.st_mode):
        raise IOError(f"{path} is not a regular file.")
    return result


def _identity(result: os.stat_result) -> tuple:
    # inode and device are missing on some platforms
    return (
        getattr(result, "st_ino", None),
        getattr(result, "st_dev", None),
        result.st_size,
        result.st_mtime_ns,
    )


@dataclass(frozen=True)
class DocumentFile:
    """A DBML file read from disk.

    Attributes:
        path: Absolute path of the file.
        content: Decoded text, line endings untouched.
        snapshot: `lstat` result taken before reading.
    """

    path: Path
    content: str
    snapshot: os.stat_result

    @classmethod
    def load(
        cls,
        raw_path: str | Path,
        base_dir: Path,
        max_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> DocumentFile:
        """Resolve, size-check and decode a DBML file.

        Args:
            raw_path: Path given by the user.
            base_dir: Directory the file must live under.
            max_size: Largest accepted file size in bytes.

        Raises:
            ValueError: If the path is not an acceptable DBML file.
            IOError: If the file is too large or cannot be read.
            UnicodeDecodeError: If the file is not valid UTF-8.

        Examples:
            document = DocumentFile.load("app.dbml", Path.cwd())
        """
        path = resolve_document_path(str(raw_path), base_dir)
        snapshot = _snapshot(path)
        if snapshot.st_size > max_size:
            raise IOError(f"{path} exceeds the maximum allowed size of {max_size} bytes.")

        try:
            data = path.read_bytes()
        except OSError as error:
            raise IOError(f"Error accessing {path}: {error}") from error
        return cls(path=path, content=data.decode("utf-8"), snapshot=snapshot)

    def is_unchanged_on_disk(self) -> bool:
        try:
            return _identity(_snapshot(self.path)) == _identity(self.snapshot)
        except IOError:
            return False

    def save(self, content: str, warn: Callable[[str], None] | None = None) -> None:
        """Replace the file with `content`.

        The text goes to a sibling temporary file that takes over the
        original's mode and, where permitted, its owner, then is renamed over
        the original. The original access time is restored afterwards.

        Raises:
            IOError: If the file was modified since it was loaded or cannot
                be replaced.
        """
        if not self.is_unchanged_on_disk():
            raise IOError(f"{self.path} changed during processing; refusing to overwrite.")

        fd, temp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content.encode("utf-8"))
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(temp_path, stat.S_IMODE(self.snapshot.st_mode))
            self._copy_owner(temp_path, warn)
            os.replace(temp_path, self.path)
        except OSError as error:
            raise IOError(f"Error writing {self.path}: {error}") from error
        finally:
            temp_path.unlink(missing_ok=True)

        written = os.stat(self.path)
        os.utime(self.path, ns=(self.snapshot.st_atime_ns, written.st_mtime_ns))

    def _copy_owner(self, target: Path, warn: Callable[[str], None] | None) -> None:
        uid = getattr(self.snapshot, "st_uid", None)
        gid = getattr(self.snapshot, "st_gid", None)
        if uid is None or gid is None or not hasattr(os, "chown"):
            return
        try:
            os.chown(target, uid, gid)
        except PermissionError:
            if warn is not None:
                warn(
                    f"Warning: Could not preserve file ownership for {self.path.name} "
                    "(requires elevated privileges)"
                )
