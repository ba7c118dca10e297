import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from splitpr.config import SplitSettings
from splitpr.patches.models import PatchRecord
from splitpr.patches.naming import allocate_path, create_patch_file
from splitpr.patches.splitter import split_diff
from splitpr.schemas.manifest import ManifestEntry
from splitpr.util.jsonl import append_jsonl
from splitpr.util.text import encode_text

logger = logging.getLogger(__name__)


def write_patch(record: PatchRecord, settings: SplitSettings) -> Path:
    path, fh = create_patch_file(
        record,
        out_dir=settings.output_dir,
        extension=settings.extension,
        max_attempts=settings.max_attempts,
        null_device=settings.null_device,
    )
    logger.info("Writing: %s", path)
    with fh:
        fh.write(encode_text(record.contents))
    return path


def write_patches(
    records: Iterable[PatchRecord],
    settings: SplitSettings,
    manifest_path: Path | None = None,
) -> list[Path]:
    """
    Write each record to its own file, in order.

    The first I/O error stops the run; files written before it are kept.
    """
    settings.output_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for record in records:
        path = write_patch(record, settings)
        written.append(path)

        if manifest_path is not None:
            entry = ManifestEntry(
                old_path=record.old_path,
                new_path=record.new_path,
                output_path=path,
                size_bytes=path.stat().st_size,
                written_at=datetime.now(timezone.utc),
            )
            append_jsonl(manifest_path, entry.model_dump_json())

    logger.info("Wrote %d patch files to %s", len(written), settings.output_dir)
    return written


def split_and_write(
    diff_txt: str,
    settings: SplitSettings,
    manifest_path: Path | None = None,
) -> list[Path]:
    # split_diff runs to completion first so a malformed diff writes nothing.
    records = split_diff(diff_txt)
    return write_patches(records, settings, manifest_path=manifest_path)


def plan_names(records: Iterable[PatchRecord], settings: SplitSettings) -> list[Path]:
    """
    Names write_patches would pick right now, without creating anything.

    Names chosen earlier in the same plan count as taken.
    """
    planned: list[Path] = []
    for record in records:
        path = allocate_path(
            record,
            out_dir=settings.output_dir,
            extension=settings.extension,
            max_attempts=settings.max_attempts,
            null_device=settings.null_device,
            reserved=set(planned),
        )
        planned.append(path)
    return planned
