import logging
import re
from collections.abc import Iterator

from splitpr.exceptions import MalformedInputError
from splitpr.patches.models import PatchRecord

logger = logging.getLogger(__name__)

DIFF_MARKER = "diff "
OLD_MARKER = "--- "
NEW_MARKER = "+++ "
VCS_PREFIXES = ("a/", "b/")

# Lines end at "\n" only; a lone "\r" or form feed is content.
LINE_RE = re.compile(r"[^\n]*\n|[^\n]+\Z")


def normalize_diff_path(raw_path: str) -> str:
    """
    Turn the remainder of a ``---``/``+++`` line into a file identity.

    git prefixes both sides with ``a/`` and ``b/``; plain ``diff`` appends a
    tab followed by the modification time.
    """
    path = raw_path.rstrip("\r\n")
    if path.startswith(VCS_PREFIXES):
        path = path[2:]
    tab_pos = path.find("\t")
    if tab_pos != -1:
        path = path[:tab_pos]
    return path


def iter_patches(diff_txt: str) -> Iterator[PatchRecord]:
    """
    Yield one PatchRecord per file segment of ``diff_txt``, in source order.

    Every line keeps its own terminator, so joining the ``contents`` of all
    records gives back ``diff_txt`` unchanged. Text before the first file
    header (commit messages, ``diff`` lines of an empty header) stays at the
    top of the first record.

    Raises MalformedInputError when a segment lacks a ``---`` or ``+++``
    line. Records yielded before the error have already been handed out;
    use split_diff for an all-or-nothing result.
    """

    current_lines: list[str] = []
    old_name = ""
    new_name = ""

    lines = (m.group() for m in LINE_RE.finditer(diff_txt))
    for line_number, line in enumerate(lines, start=1):
        if line.startswith(DIFF_MARKER) and old_name:
            if not new_name:
                raise MalformedInputError(line_number)
            yield PatchRecord(
                old_path=old_name,
                new_path=new_name,
                contents="".join(current_lines),
            )
            current_lines = []
            old_name = ""
            new_name = ""
        elif line.startswith(OLD_MARKER):
            old_name = normalize_diff_path(line[len(OLD_MARKER):])
        elif line.startswith(NEW_MARKER):
            new_name = normalize_diff_path(line[len(NEW_MARKER):])

        current_lines.append(line)

    if not old_name or not new_name:
        raise MalformedInputError()

    yield PatchRecord(
        old_path=old_name,
        new_path=new_name,
        contents="".join(current_lines),
    )


def split_diff(diff_txt: str) -> list[PatchRecord]:
    records = list(iter_patches(diff_txt))
    logger.debug("Split diff into %d patch records", len(records))
    return records
