"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~maru.exceptions.MaruError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ maru generate --shell bash --from-toml broken.toml
    $ echo $?
    7   # EXIT_DOCUMENT_ERROR -- the document could not be turned into a command tree
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_DOCUMENT_ERROR = 7
"""The command document could not be loaded, decoded, or deserialized."""
