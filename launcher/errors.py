"""
Error types raised while collecting parameters and running deployments
"""

from typing import Optional


class LauncherError(Exception):
    """Base class for all launcher errors"""


class ConfigError(LauncherError):
    """Configuration or template file is missing or unusable"""


class AccessDenied(LauncherError):
    """User is not on the allow-list"""

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} is not allowed to use this bot")
        self.user_id = user_id


class ValidationError(LauncherError):
    """User supplied parameters are missing or malformed"""


class PreconditionError(LauncherError):
    """A required external resource (key, script, contract source) is missing"""


class ProcessError(LauncherError):
    """External command exited non-zero or ran past its timeout"""

    # Telegram caps messages at 4096 chars, keep the tail that explains the failure
    OUTPUT_TAIL_CHARS = 1500

    def __init__(self, message: str, output: str = "", returncode: Optional[int] = None,
                 timed_out: bool = False):
        super().__init__(message)
        self.output = output or ""
        self.returncode = returncode
        self.timed_out = timed_out

    def __str__(self) -> str:
        message = super().__str__()
        tail = self.output.strip()[-self.OUTPUT_TAIL_CHARS:]
        if tail:
            return f"{message}\n{tail}"
        return message
