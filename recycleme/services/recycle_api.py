import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from recycleme.core.errors import BarcodeValidationError, FetchError
from recycleme.core.models import FetchPayload, Material
from recycleme.core.utils import io_bound

logger = logging.getLogger(__name__)

EMPTY_BARCODE_MESSAGE = "Please enter a barcode"


def parse_materials(data: List[dict]) -> List[Material]:
    return [Material(**m) for m in data]


class RecycleApiClient:
    """Talks to the recycleme server: disposal lookups and user contributions."""

    def __init__(self, server_url: str, timeout: Optional[float] = None):
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout

    async def fetch(self, ean: str) -> FetchPayload:
        """
        Looks up the product and its material -> bin mapping.
        An empty throwAway map is a valid answer (no disposal data known).
        """
        ean = (ean or "").strip()
        if not ean:
            raise BarcodeValidationError(EMPTY_BARCODE_MESSAGE)

        logger.info(f"Fetching disposal data for {ean}")
        response = await self._request(requests.get, f"/throwaway/{quote(ean, safe='')}")
        data = self._decode_json(response)

        try:
            payload = FetchPayload.model_validate(data)
        except ValidationError as e:
            logger.error(f"Malformed throwaway payload for {ean}: {e}")
            raise FetchError(f"Malformed response from server ({e.error_count()} invalid field(s))")

        logger.info(f"Found {payload.product.name!r} with {len(payload.throw_away)} material(s)")
        return payload

    async def get_materials(self) -> List[Material]:
        response = await self._request(requests.get, "/materials/")
        data = self._decode_json(response)
        try:
            return parse_materials(data)
        except (TypeError, ValidationError) as e:
            logger.error(f"Malformed materials payload: {e}")
            raise FetchError("Malformed response from server")

    async def add_package(self, ean: str, materials: List[Material]):
        form = {
            "materials": json.dumps([m.model_dump() for m in materials]),
            "ean": ean,
        }
        await self._request(requests.post, "/package/add", data=form)
        logger.info(f"Suggested {len(materials)} material(s) for {ean}")

    async def add_blacklist(self, name: str, url: str, ean: str, website: str):
        form = {"name": name, "url": url, "ean": ean, "website": website}
        await self._request(requests.post, "/blacklist/add", data=form)
        logger.info(f"Reported {url} as wrong product for {ean}")

    async def _request(self, method, path: str, **kwargs) -> requests.Response:
        url = f"{self.server_url}{path}"
        try:
            response = await io_bound(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request to {url} failed: {e}")
            raise FetchError(str(e)) from e

        if not 200 <= response.status_code < 300:
            body = (response.text or "").strip()
            logger.error(f"API Error {response.status_code} for {url}: {body}")
            raise FetchError(body or f"API Error: {response.status_code}", status_code=response.status_code)

        return response

    def _decode_json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Response from {response.url} is not JSON: {e}")
            raise FetchError("Malformed response from server")
