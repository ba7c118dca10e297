import logging
from collections.abc import Collection, Iterator
from pathlib import Path
from typing import BinaryIO

from splitpr.exceptions import NameExhaustedError
from splitpr.patches.models import NULL_DEVICE, PatchRecord

logger = logging.getLogger(__name__)

# Characters Windows rejects in file names, plus "." so the name cannot be
# confused with the extension we append.
FORBIDDEN_CHARS = frozenset('/<>:"\\|?*.')

DEFAULT_EXTENSION = ".diff"
DEFAULT_MAX_ATTEMPTS = 4096


def base_identity(record: PatchRecord, null_device: str = NULL_DEVICE) -> str:
    """Path the output name is derived from: the new file, or the old one for deletions."""
    if record.new_path == null_device:
        return record.old_path
    return record.new_path


def sanitize_name(identity: str) -> str:
    return "".join("_" if c in FORBIDDEN_CHARS else c for c in identity)


def candidate_names(
    base_name: str,
    extension: str = DEFAULT_EXTENSION,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Iterator[str]:
    """``base.diff``, ``base-1.diff``, ``base-2.diff`` ... up to max_attempts names."""
    yield f"{base_name}{extension}"
    for counter in range(1, max_attempts):
        yield f"{base_name}-{counter}{extension}"


def allocate_path(
    record: PatchRecord,
    out_dir: Path = Path("."),
    extension: str = DEFAULT_EXTENSION,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    null_device: str = NULL_DEVICE,
    reserved: Collection[Path] = (),
) -> Path:
    """
    Return the first free output path for ``record`` inside ``out_dir``.

    This only probes the directory. Nothing stops another process from
    taking the name before the caller writes it; use create_patch_file when
    the file is going to be written. Paths in ``reserved`` count as taken.

    Raises:
        NameExhaustedError: if max_attempts names are all taken
        OSError: if existence cannot be determined
    """
    base_name = sanitize_name(base_identity(record, null_device))
    for name in candidate_names(base_name, extension, max_attempts):
        candidate = Path(out_dir, name)
        if candidate in reserved:
            continue
        # lstat, so a dangling symlink still counts as taken.
        try:
            candidate.lstat()
        except FileNotFoundError:
            return candidate
        logger.debug("Output name taken: %s", candidate)

    logger.warning("Gave up on %s after %d names", base_name, max_attempts)
    raise NameExhaustedError(base_name, max_attempts)


def create_patch_file(
    record: PatchRecord,
    out_dir: Path = Path("."),
    extension: str = DEFAULT_EXTENSION,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    null_device: str = NULL_DEVICE,
) -> tuple[Path, BinaryIO]:
    """
    Exclusively create the output file for ``record`` and return it open for writing.

    Each candidate is opened with mode ``"xb"``, so checking and creating
    happen in one step; an existing file moves on to the next suffix.

    Raises:
        NameExhaustedError: if max_attempts names are all taken
        OSError: for any failure other than the name already existing
    """
    base_name = sanitize_name(base_identity(record, null_device))
    for name in candidate_names(base_name, extension, max_attempts):
        candidate = Path(out_dir, name)
        try:
            fh = open(candidate, "xb")
        except FileExistsError:
            logger.debug("Output name taken: %s", candidate)
            continue
        return candidate, fh

    logger.warning("Gave up on %s after %d names", base_name, max_attempts)
    raise NameExhaustedError(base_name, max_attempts)
