"""
Custom exception classes for ERC725Y codec and storage operations.
"""


class InvalidInputError(ValueError):
    """Raised when a key, address or field value is not well-formed."""
    pass


class MalformedDataError(ValueError):
    """Raised when stored bytes are inconsistent with their declared layout."""
    pass


class CapacityExceededError(ValueError):
    """Raised when an address list does not fit in a uint16 count."""
    pass


class RemoteReadError(Exception):
    """Raised when reading profile storage over RPC fails."""
    pass


class RemoteWriteError(Exception):
    """Raised when submitting or confirming a setDataBatch transaction fails."""
    pass
