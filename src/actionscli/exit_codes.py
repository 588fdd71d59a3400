"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~actionscli.exceptions.ActionsCliError` subclass.
Shell wrappers can inspect the exit code to tell a usage mistake from a
failed build without parsing stderr.

Example::

    $ actionscli run --app app.json greet
    $ echo $?
    2   # EXIT_INVALID_USAGE -- a required argument was missing
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required fields."""

EXIT_ACTION_NOT_FOUND = 4
"""No runtime function or source defines the requested action."""

EXIT_SOURCE_ERROR = 6
"""An action source could not be read (file error, HTTP failure)."""

EXIT_DOCUMENT_ERROR = 7
"""The application document could not be parsed or validated."""

EXIT_BUILD_FAILURE = 8
"""Source generation or the external build toolchain failed."""
