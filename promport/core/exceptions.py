from typing import List, Optional, Sequence

from fastapi import status


class PromPortError(Exception):
    """Base class for errors reported to the browser as ``{success: false, error}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(PromPortError):
    """A required setting is not configured."""

    def __init__(self, keys: Sequence[str]):
        self.keys: List[str] = list(keys)
        super().__init__(
            f"Missing required configuration: {', '.join(self.keys)}"
        )


class RequestValidationFailure(PromPortError):
    status_code = status.HTTP_400_BAD_REQUEST


class CommandExecutionError(PromPortError):
    """promtool could not be started or exited with a non-zero status."""

    def __init__(
        self,
        message: str,
        argv: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.argv = list(argv or [])
        self.returncode = returncode
        self.stderr = stderr
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class OutputLimitExceeded(CommandExecutionError):
    def __init__(self, argv: Sequence[str], limit: int):
        self.limit = limit
        super().__init__(
            f"Command output exceeded the {limit} byte limit", argv=argv
        )
