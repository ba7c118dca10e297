import json
import logging
import os
from pathlib import Path
from typing import Any

from filelock import FileLock

logger = logging.getLogger(__name__)


def append_jsonl(path: Path, record: dict[str, Any] | str) -> None:
    """
    Append one record (dict or JSON string) as a line of a JSONL file.

    Writers sharing the file are serialized through ``<path>.lock``. Write
    failures raise OSError.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if isinstance(record, str):
        json_line = record if record.endswith("\n") else record + "\n"
    else:
        json_line = json.dumps(record) + "\n"

    with FileLock(str(path) + ".lock"):
        with open(path, "ab") as f:
            f.write(json_line.encode("utf-8"))
            f.flush()
            os.fsync(f.fileno())

    logger.debug("Appended record to %s", path)
