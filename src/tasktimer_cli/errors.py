"""Application error types.

Validation failures are raised synchronously at the call site. A cancelled
dialog only travels through the dialog's result, never through the mediator.
"""

from tasktimer_cli.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ValidationError(AppError):
    """Bad constructor or method arguments (task fields, store arguments)."""

    def __init__(self, message: str):
        super().__init__(message, exit_code=ERROR_INVALID_ARGS)


class DialogCancelled(AppError):
    """The user declined or dismissed a confirmation dialog."""

    def __init__(self, message: str = "User closed dialog."):
        super().__init__(message)
