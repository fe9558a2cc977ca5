"""Typed input and result models for the postcodes.io client."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

T = TypeVar("T")


@dataclass(frozen=True)
class Geolocation:
    """One point for bulk reverse geocoding.

    ``limit`` and ``radius`` override the call-level values for this point only.
    """

    latitude: float
    longitude: float
    limit: int | None = None
    radius: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire object, leaving out unset overrides."""
        data: dict[str, Any] = {"latitude": self.latitude, "longitude": self.longitude}
        if self.limit is not None:
            data["limit"] = self.limit
        if self.radius is not None:
            data["radius"] = self.radius
        return data


@dataclass(frozen=True)
class Found(Generic[T]):
    """The service answered 200 with a non-null ``result``."""

    data: T
    response: httpx.Response

    ok = True

    @property
    def value(self) -> T:
        return self.data

    def value_or(self, default: Any) -> T:
        return self.data


@dataclass(frozen=True)
class Empty:
    """The service answered 200 with a null ``result``.

    Distinct from Failure: e.g. a random postcode filtered by an outcode
    that has no postcodes.
    """

    response: httpx.Response

    ok = False
    value = None

    def value_or(self, default: Any) -> Any:
        return default


@dataclass(frozen=True)
class Failure:
    """The request failed or the resource does not exist.

    ``response`` is the raw response when one was received (404s included);
    it is None when the transport could not complete the exchange.
    """

    response: httpx.Response | None
    error: Exception | None = None

    ok = False
    value = None

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    def value_or(self, default: Any) -> Any:
        return default


Result = Found[T] | Empty | Failure
