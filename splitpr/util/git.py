import logging
from pathlib import Path

from splitpr.exceptions import GitCommandError
from splitpr.util.process import check_exit_code, run_command
from splitpr.util.text import read_text_file

logger = logging.getLogger(__name__)


def _raise_on_failure(cmd_name: str, stderr_path: Path, exit_code: int) -> None:
    if check_exit_code(cmd_name, exit_code) is None:
        return
    try:
        stderr = read_text_file(stderr_path)
    except OSError:
        stderr = ""
    raise GitCommandError(cmd_name, exit_code, stderr)


def merge_base(
    repo_dir: Path,
    base: str,
    logs_dir: Path,
    head: str = "HEAD",
    timeout_sec: int = 30,
) -> str:
    cmd = ["git", "merge-base", head, base]

    stdout_path, stderr_path, exit_code = run_command(
        cmd_name="git_merge_base",
        cmd=cmd,
        timeout=timeout_sec,
        logs_dir=logs_dir,
        cwd=repo_dir,
    )
    _raise_on_failure("git_merge_base", stderr_path, exit_code)

    commit = read_text_file(stdout_path).strip()
    if not commit:
        raise GitCommandError("git_merge_base", exit_code, "no merge base printed")
    return commit


def diff_since(
    repo_dir: Path, commit: str, logs_dir: Path, timeout_sec: int = 120
) -> str:
    cmd = ["git", "diff", commit]

    stdout_path, stderr_path, exit_code = run_command(
        cmd_name="git_diff",
        cmd=cmd,
        timeout=timeout_sec,
        logs_dir=logs_dir,
        cwd=repo_dir,
    )
    _raise_on_failure("git_diff", stderr_path, exit_code)

    return read_text_file(stdout_path)


def read_merge_base_diff(
    repo_dir: Path, base: str, logs_dir: Path, head: str = "HEAD"
) -> str:
    """
    Diff the working tree against the merge base of ``head`` and ``base``,
    i.e. everything the current branch changed since it forked from ``base``.
    """
    commit = merge_base(repo_dir, base, logs_dir, head=head)
    logger.info("Diffing against merge base %s of %s and %s", commit, head, base)
    return diff_since(repo_dir, commit, logs_dir)
