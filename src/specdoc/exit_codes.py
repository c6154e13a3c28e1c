"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specdoc.exceptions.SpecdocError` subclass.
Build scripts can inspect the exit code to tell a broken document apart from
a missing one without parsing stderr.

Example::

    $ specdoc --spec petstore.json groups
    $ echo $?
    8   # EXIT_SPEC_RESOLUTION_ERROR -- a response model has no title
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_SPEC_LOAD_ERROR = 7
"""The specification document could not be fetched or parsed."""

EXIT_SPEC_RESOLUTION_ERROR = 8
"""The specification was parsed but cannot be documented (authoring error)."""
