"""
Exceptions raised inside the DAO layer.
"""


class DAOError(Exception):
    """Base class for DAO errors."""


class InvalidIdError(DAOError, ValueError):
    """Raised when a value is not a well-formed ObjectId."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid identifier: {value!r}")
