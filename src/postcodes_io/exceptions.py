"""Exceptions raised by the postcodes.io client.

Only argument problems are raised. Network and service failures come back
as ``Failure`` results, see ``postcodes_io.models``.
"""


class PostcodesIOError(Exception):
    """Base class for all postcodes_io errors."""


class InvalidArgument(PostcodesIOError, ValueError):
    """A caller-supplied argument was rejected before any request was sent."""

    def __init__(self, param: str, message: str):
        super().__init__(message)
        self.param = param


class OutOfRange(InvalidArgument):
    """A value fell outside its closed ``[minimum, maximum]`` range."""

    def __init__(
        self,
        param: str,
        value: float,
        minimum: float,
        maximum: float,
        index: int | None = None,
    ):
        message = f"`{param}` must be between {minimum} and {maximum}, got {value}"
        if index is not None:
            message += f" in geolocation {index}"
        super().__init__(param, message)
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        self.index = index


class MissingRequired(InvalidArgument):
    """A conditionally required field was absent from a bulk item."""

    def __init__(self, param: str, index: int):
        super().__init__(param, f"`{param}` is required in geolocation {index}")
        self.index = index
