"""Exception hierarchy for specdoc.

All exceptions inherit from :class:`SpecdocError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specdoc.exit_codes`.
The top-level error handler in :func:`specdoc.app.main` catches
``SpecdocError`` and exits with the appropriate code.

Subclass hierarchy::

    SpecdocError (exit 1)
    +-- InvalidUsageError    (exit 2)
    +-- SpecLoadError        (exit 7)
    +-- SpecResolutionError  (exit 8)
    +-- ConfigError          (exit 1)
"""

from specdoc.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SPEC_LOAD_ERROR,
    EXIT_SPEC_RESOLUTION_ERROR,
)


class SpecdocError(Exception):
    """Base exception for all specdoc errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecdocError):
    """Raised for invalid CLI arguments or lookups of unknown groups/resources."""

    exit_code = EXIT_INVALID_USAGE


class SpecLoadError(SpecdocError):
    """Raised when a specification document cannot be fetched, read, or parsed.

    A multi-file load can catch this per file; nothing about the documentation
    model has been built when it is raised.
    """

    exit_code = EXIT_SPEC_LOAD_ERROR


class SpecResolutionError(SpecdocError):
    """Raised when a parsed specification cannot be turned into documentation.

    Examples are a response model at the root of a schema tree with no
    ``title`` (the resource would have no identity) or an operation with
    neither an operation ID nor a summary to name it by.
    """

    exit_code = EXIT_SPEC_RESOLUTION_ERROR


class ConfigError(SpecdocError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
