"""Client for Postcodes.io - free UK postcode & geolocation API.

No authentication required. Docs: https://postcodes.io/

Every method sends exactly one request and returns a ``Found``, ``Empty`` or
``Failure`` result carrying the raw response. Arguments are range checked
first; a bad argument raises ``InvalidArgument`` and nothing is sent.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any
from urllib.parse import quote

import httpx

from postcodes_io.models import Empty, Failure, Found, Geolocation, Result
from postcodes_io.validation import (
    GEOLOCATIONS_BATCH,
    LATITUDE,
    LIMIT,
    LONGITUDE,
    OUTCODE_RADIUS,
    POSTCODE_RADIUS,
    POSTCODES_BATCH,
    Range,
    check_batch_size,
    check_geolocation,
    check_ranges,
)

logger = logging.getLogger(__name__)

BASE_URL = "https://api.postcodes.io"

API_POSTCODES = "postcodes"
API_OUTCODES = "outcodes"
API_PLACES = "places"


def _segment(code: str) -> str:
    """Percent-encode a code for use as a single path segment."""
    return quote(code, safe="")


def _join_filter(filter: str | Sequence[str] | None) -> str:
    if filter is None:
        return ""
    if isinstance(filter, str):
        return filter
    return ",".join(filter)


class PostcodesClient:
    """Client for the postcodes.io REST API.

    Holds no per-call state, so one instance can be shared between tasks.

    Args:
        base_url: Service root, for self-hosted postcodes.io instances
        timeout: Request timeout in seconds
        http: An existing httpx.AsyncClient to send requests through. Its own
            base_url and timeout are used; ``base_url`` and ``timeout`` here are
            ignored, and close() leaves it open.
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 15.0,
        http: httpx.AsyncClient | None = None,
    ):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout, base_url=base_url)

    async def close(self):
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "PostcodesClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # --- postcodes ---

    async def lookup_postcode(self, postcode: str) -> Result[dict[str, Any]]:
        """Look up a UK postcode and return all available data.

        The record has keys: postcode, outcode, incode, latitude, longitude,
        admin_district, parish, parliamentary_constituency, region, country, etc.
        Unknown postcodes give a Failure (the service answers 404).
        """
        return await self._lookup(API_POSTCODES, postcode)

    async def geocode(self, postcode: str) -> Result[tuple[float, float]]:
        """Convert a postcode to a (latitude, longitude) tuple."""
        result = await self.lookup_postcode(postcode)
        if not isinstance(result, Found):
            return result
        return Found((result.data["latitude"], result.data["longitude"]), result.response)

    async def bulk_lookup_postcodes(
        self,
        postcodes: Iterable[str],
        filter: str | Sequence[str] | None = None,
    ) -> Result[list[dict[str, Any]]]:
        """Look up 1-100 postcodes in one request.

        Args:
            postcodes: Postcodes to look up
            filter: Attributes to return for each postcode, as a comma separated
                string or a sequence of names

        Returns:
            One ``{"query": ..., "result": ...}`` entry per input, in input order.
            ``result`` is None for postcodes that were not found.
        """
        postcodes = list(postcodes)
        check_batch_size("postcodes", postcodes, POSTCODES_BATCH)

        params = {}
        attributes = _join_filter(filter)
        if attributes:
            params["filter"] = attributes

        return await self._request(
            "POST", f"/{API_POSTCODES}", params=params, json={"postcodes": postcodes}
        )

    async def reverse_geocode_postcodes(
        self,
        latitude: float,
        longitude: float,
        limit: int = 10,
        radius: int = 100,
        wide_search: bool = False,
    ) -> Result[list[dict[str, Any]]]:
        """Find postcodes near a point, nearest first.

        Args:
            latitude: Latitude
            longitude: Longitude
            limit: Maximum number of postcodes to return [1 - 100]
            radius: Search radius in metres [1 - 2,000]
            wide_search: Search up to a 20km radius, capped at 10 results. The
                service then ignores ``radius`` and any ``limit`` above 10.
        """
        return await self._reverse_geocode(
            API_POSTCODES, latitude, longitude, limit, radius, POSTCODE_RADIUS, wide_search
        )

    async def bulk_reverse_geocode(
        self,
        geolocations: Sequence[Geolocation | Mapping[str, Any]],
        limit: int = 10,
        radius: int = 100,
        wide_search: bool = False,
        filter: str | Sequence[str] | None = None,
    ) -> Result[list[dict[str, Any]]]:
        """Reverse geocode 1-100 points in one request.

        Each point may override ``limit`` and ``radius``; overrides are held to
        the same ranges as the call-level values.

        Returns:
            One ``{"query": ..., "result": [...]}`` entry per point, in input order.
        """
        check_batch_size("geolocations", list(geolocations), GEOLOCATIONS_BATCH)
        check_ranges([
            ("limit", limit, LIMIT),
            ("radius", radius, POSTCODE_RADIUS),
        ])

        items = []
        for index, geolocation in enumerate(geolocations):
            item = geolocation.to_dict() if isinstance(geolocation, Geolocation) else dict(geolocation)
            check_geolocation(item, index)
            items.append(item)

        # The bulk endpoint spells the flag "widesearch", unlike the GET endpoint
        params: dict[str, Any] = {"limit": limit, "radius": radius, "widesearch": wide_search}
        attributes = _join_filter(filter)
        if attributes:
            params["filter"] = attributes

        return await self._request(
            "POST", f"/{API_POSTCODES}", params=params, json={"geolocations": items}
        )

    async def query_postcodes(self, query: str, limit: int = 10) -> Result[list[dict[str, Any]]]:
        """Search for postcodes matching a full or partial postcode."""
        return await self._query(API_POSTCODES, query, limit)

    async def validate_postcode(self, postcode: str) -> Result[bool]:
        """Check if a postcode is valid and currently assigned."""
        return await self._request("GET", f"/{API_POSTCODES}/{_segment(postcode)}/validate")

    async def autocomplete_postcode(self, postcode: str, limit: int = 10) -> Result[list[str]]:
        """List full postcodes starting with a partial postcode."""
        check_ranges([("limit", limit, LIMIT)])
        return await self._request(
            "GET",
            f"/{API_POSTCODES}/{_segment(postcode)}/autocomplete",
            params={"limit": limit},
        )

    async def nearest_postcodes(
        self, postcode: str, limit: int = 10, radius: int = 100
    ) -> Result[list[dict[str, Any]]]:
        """Find the postcodes nearest a postcode (radius up to 2,000m)."""
        return await self._nearest(API_POSTCODES, postcode, limit, radius, POSTCODE_RADIUS)

    async def random_postcode(self, outcode: str | None = None) -> Result[dict[str, Any]]:
        """Return a random postcode, optionally restricted to an outcode.

        An outcode with no postcodes gives Empty rather than Failure.
        """
        return await self._random(API_POSTCODES, outcode)

    async def lookup_scottish_postcode(self, postcode: str) -> Result[dict[str, Any]]:
        """Return Scottish Postcode Directory data for a postcode."""
        return await self._request("GET", f"/scotland/postcodes/{_segment(postcode)}")

    async def lookup_terminated_postcode(self, postcode: str) -> Result[dict[str, Any]]:
        """Return termination data (month_terminated, year_terminated) for a postcode.

        Active and unknown postcodes give a Failure.
        """
        return await self._request("GET", f"/terminated_postcodes/{_segment(postcode)}")

    # --- outcodes ---

    async def lookup_outcode(self, outcode: str) -> Result[dict[str, Any]]:
        """Return geolocation data for the centroid of an outward code."""
        return await self._lookup(API_OUTCODES, outcode)

    async def reverse_geocode_outcodes(
        self,
        latitude: float,
        longitude: float,
        limit: int = 10,
        radius: int = 5000,
    ) -> Result[list[dict[str, Any]]]:
        """Find outcodes near a point (radius up to 25,000m). No wide search mode."""
        return await self._reverse_geocode(
            API_OUTCODES, latitude, longitude, limit, radius, OUTCODE_RADIUS, None
        )

    async def nearest_outcodes(
        self, outcode: str, limit: int = 10, radius: int = 5000
    ) -> Result[list[dict[str, Any]]]:
        """Find the outcodes nearest an outcode (radius up to 25,000m)."""
        return await self._nearest(API_OUTCODES, outcode, limit, radius, OUTCODE_RADIUS)

    # --- places ---

    async def lookup_place(self, code: str) -> Result[dict[str, Any]]:
        return await self._lookup(API_PLACES, code)

    async def query_places(self, query: str, limit: int = 10) -> Result[list[dict[str, Any]]]:
        return await self._query(API_PLACES, query, limit)

    async def random_place(self) -> Result[dict[str, Any]]:
        return await self._random(API_PLACES)

    # --- shared request shapes ---

    async def _lookup(self, api: str, code: str) -> Result:
        return await self._request("GET", f"/{api}/{_segment(code)}")

    async def _nearest(self, api: str, code: str, limit: int, radius: int, radius_range: Range) -> Result:
        # Results are of the same kind as the code: postcodes for a postcode,
        # outcodes for an outcode
        check_ranges([
            ("limit", limit, LIMIT),
            ("radius", radius, radius_range),
        ])
        return await self._request(
            "GET",
            f"/{api}/{_segment(code)}/nearest",
            params={"limit": limit, "radius": radius},
        )

    async def _query(self, api: str, query: str, limit: int) -> Result:
        check_ranges([("limit", limit, LIMIT)])
        return await self._request("GET", f"/{api}", params={"query": query, "limit": limit})

    async def _random(self, api: str, outcode: str | None = None) -> Result:
        params = {}
        if api == API_POSTCODES and outcode:
            params["outcode"] = outcode
        return await self._request("GET", f"/random/{api}", params=params)

    async def _reverse_geocode(
        self,
        api: str,
        latitude: float,
        longitude: float,
        limit: int,
        radius: int,
        radius_range: Range,
        wide_search: bool | None,
    ) -> Result:
        check_ranges([
            ("latitude", latitude, LATITUDE),
            ("longitude", longitude, LONGITUDE),
            ("limit", limit, LIMIT),
            ("radius", radius, radius_range),
        ])

        params: dict[str, Any] = {"lat": latitude, "lon": longitude, "limit": limit, "radius": radius}
        if wide_search is not None:
            params["wideSearch"] = wide_search

        return await self._request("GET", f"/{api}", params=params)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Result:
        """Send one request and unwrap the ``{"status": ..., "result": ...}`` envelope."""
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._http.request(method, path, params=params or None, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning("postcodes.io %s %s returned %d", method, path, e.response.status_code)
            return Failure(e.response, e)
        except httpx.RequestError as e:
            # Also covers undecodable bodies and redirect loops
            logger.warning("postcodes.io %s %s failed: %s", method, path, e)
            return Failure(None, e)

        if response.status_code != 200:
            logger.warning("postcodes.io %s %s returned %d", method, path, response.status_code)
            return Failure(response)

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("postcodes.io %s %s returned invalid JSON: %s", method, path, e)
            return Failure(response, e)

        result = data.get("result") if isinstance(data, dict) else None
        if result is None:
            return Empty(response)
        return Found(result, response)
