"""Exception hierarchy for actionscli.

All exceptions inherit from :class:`ActionsCliError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`actionscli.exit_codes`.
The top-level error handler in :func:`actionscli.app.main` (and the ``main``
function of every generated program) catches ``ActionsCliError`` and exits
with the appropriate code.

Subclass hierarchy::

    ActionsCliError           (exit 1)
    +-- InvalidUsageError     (exit 2)
    |   +-- MissingFieldError (exit 2)
    +-- ActionNotFoundError   (exit 4)
    +-- SourceError           (exit 6)
    +-- DocumentParseError    (exit 7)
    +-- BuildError            (exit 8)
    |   +-- CodegenError      (exit 8)
    +-- ActionResolutionError (exit 1)
    +-- ConfigError           (exit 1)
"""

from actionscli.exit_codes import (
    EXIT_ACTION_NOT_FOUND,
    EXIT_BUILD_FAILURE,
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SOURCE_ERROR,
)


class ActionsCliError(Exception):
    """Base exception for all actionscli errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`actionscli.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ActionsCliError):
    """Raised for unknown sub-commands, bad options, or malformed invocations."""

    exit_code = EXIT_INVALID_USAGE


class MissingFieldError(InvalidUsageError):
    """Raised when a required argument or flag has no value after binding.

    Args:
        kind: ``"Argument"`` or ``"Flag"``.
        field: Declared name of the missing field.
    """

    def __init__(self, kind: str, field: str):
        super().__init__(f"{kind} {field} is required.")
        self.kind = kind
        self.field = field


class ActionNotFoundError(ActionsCliError):
    """Raised when neither the runtime nor any source defines an action."""

    exit_code = EXIT_ACTION_NOT_FOUND


class SourceError(ActionsCliError):
    """Raised when an action source cannot be read or returns garbage."""

    exit_code = EXIT_SOURCE_ERROR


class DocumentParseError(ActionsCliError):
    """Raised when an application document is malformed or fails validation."""

    exit_code = EXIT_DOCUMENT_ERROR


class BuildError(ActionsCliError):
    """Raised when a build fails at any stage.

    Args:
        message: Description of the failing stage.
        returncode: Exit status of the toolchain process, if it ran.
    """

    exit_code = EXIT_BUILD_FAILURE

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode


class CodegenError(BuildError):
    """Raised when a value in the command tree has no exact source literal."""


class ActionResolutionError(ActionsCliError):
    """Raised when a command's action reference has an unrecognised shape."""


class ConfigError(ActionsCliError):
    """Raised for configuration problems (invalid project config, bad env values)."""
