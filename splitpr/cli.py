import logging
import tempfile
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError

from splitpr.config import load_settings
from splitpr.exceptions import SplitPRError
from splitpr.logging import setup_logging
from splitpr.patches.splitter import split_diff
from splitpr.util.git import read_merge_base_diff
from splitpr.util.text import read_stdin_text
from splitpr.writer import plan_names, write_patches

logger = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _read_diff(base: str | None, repo: Path, logs_dir: Path | None) -> str:
    if base is None:
        logger.info("Reading a diff from stdin.")
        return read_stdin_text()
    if logs_dir is not None:
        return read_merge_base_diff(repo, base, logs_dir)
    with tempfile.TemporaryDirectory(prefix="splitpr-git-") as tmp:
        return read_merge_base_diff(repo, base, Path(tmp))


@app.command("split")
def split_cmd(
    base: str | None = typer.Option(
        None, "--base", help="Diff against the merge base of HEAD and this ref instead of reading stdin"
    ),
    repo: Path = typer.Option(Path("."), "--repo", help="Repository used with --base"),
    out: Path | None = typer.Option(None, "--out", help="Directory for the patch files"),
    manifest: Path | None = typer.Option(
        None, "--manifest", help="Append one JSON line per written file here"
    ),
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", help="Numbered names to try before giving up"
    ),
    git_logs: Path | None = typer.Option(
        None, "--git-logs", help="Keep git stdout/stderr in this directory"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the file names without writing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    Split a diff into one .diff file per changed file.
    """
    try:
        settings = load_settings(output_dir=out, max_attempts=max_attempts)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc))
    setup_logging(logging.DEBUG if verbose else settings.log_level)

    try:
        diff_txt = _read_diff(base, repo, git_logs)
        records = split_diff(diff_txt)
        if dry_run:
            for record, path in zip(records, plan_names(records, settings)):
                typer.echo(f"{path}\t{record.old_path} -> {record.new_path}")
            return
        written = write_patches(records, settings, manifest_path=manifest)
    except (SplitPRError, OSError) as exc:
        _fail(exc)

    typer.echo(f"Wrote {len(written)} patch files")


@app.command("show")
def show_cmd(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """
    List the files in a diff read from stdin.
    """
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        records = split_diff(read_stdin_text())
    except SplitPRError as exc:
        _fail(exc)

    for record in records:
        typer.echo(f"{record.old_path} -> {record.new_path} ({record.line_count} lines)")
    typer.echo(f"{len(records)} files")


@app.callback()
def main():
    """
    splitpr: split a multi-file diff into per-file patches
    """
    pass
