import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


def run_command(
    cmd_name: str,
    cmd: list[str],
    timeout: int,
    logs_dir: Path,
    cwd: Path | None = None,
) -> tuple[Path, Path, int]:
    """
    Run ``cmd`` and capture its output in ``<logs_dir>/<cmd_name>_std{out,err}.txt``.

    Returns:
        (stdout_path, stderr_path, exit_code); a timeout is reported as 124
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    stdout_path = logs_dir / f"{cmd_name}_stdout.txt"
    stderr_path = logs_dir / f"{cmd_name}_stderr.txt"

    logger.debug("Running %s: %s (cwd=%s)", cmd_name, " ".join(cmd), cwd)
    with open(stdout_path, "wb") as out_f, open(stderr_path, "wb") as err_f:
        try:
            result = subprocess.run(
                cmd,
                stdout=out_f,
                stderr=err_f,
                timeout=timeout,
                cwd=cwd,
                check=False,
            )
            exit_code = result.returncode
        except subprocess.TimeoutExpired:
            err_f.write(f"\n{cmd_name} timed out after {timeout}s\n".encode("utf-8"))
            exit_code = TIMEOUT_EXIT_CODE

    logger.debug("%s exited with %d", cmd_name, exit_code)
    return stdout_path, stderr_path, exit_code


def check_exit_code(cmd_name: str, exit_code: int, success: int = 0) -> ValueError | None:
    if exit_code == success:
        return None
    return ValueError(f"{cmd_name} failed with exit code {exit_code}")
