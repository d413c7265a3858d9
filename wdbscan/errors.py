"""Exceptions raised by wdbscan.

- ConfigurationError: invalid inputs or parameters, raised before any computation.
- ResultNotRequestedError: access to a result artifact that was not requested.
"""


class DBSCANError(Exception):
    """Base class for all wdbscan errors."""


class ConfigurationError(DBSCANError, ValueError):
    """Invalid parameters or inputs for a compute call."""


class ResultNotRequestedError(DBSCANError):
    """An artifact was accessed that was not part of the requested result options.

    Args:
        option: The `ResultOptions` member of the missing artifact.
    """

    def __init__(self, option):
        self.option = option
        name = option.name.lower() if option.name else str(option)
        super().__init__(
            f"Result '{name}' was not requested. "
            f"Add ResultOptions.{option.name} to result_options to compute it."
        )
