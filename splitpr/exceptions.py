class SplitPRError(Exception):
    pass


class MalformedInputError(SplitPRError):
    def __init__(self, line_number: int | None = None):
        self.line_number = line_number
        if line_number is None:
            message = "Did not find any lines starting with --- or +++ in the diff"
        else:
            message = (
                f"Segment ending before line {line_number} is missing a --- or +++ line"
            )
        super().__init__(message)


class NameExhaustedError(SplitPRError):
    def __init__(self, base_name: str, attempts: int):
        self.base_name = base_name
        self.attempts = attempts
        super().__init__(
            f"No free output name for {base_name} after {attempts} attempts"
        )


class GitCommandError(SplitPRError):
    def __init__(self, cmd_name: str, exit_code: int, stderr: str = ""):
        self.cmd_name = cmd_name
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"{cmd_name} failed with exit code {exit_code}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
