import logging
import math
from typing import Any, Optional

import httpx

from models.schemas import Coordinate, PlaceRecord, PlacesSearchRequest, PlacesSearchResponse

logger = logging.getLogger(__name__)

NEARBY_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
DEFAULT_IMAGE_REF = "assets/ToiletPhotos/toilet1.jpg"


def _to_record(result: dict[str, Any]) -> PlaceRecord:
    location = (result.get("geometry") or {}).get("location") or {}
    coordinate = None
    if location.get("lat") is not None and location.get("lng") is not None:
        coordinate = Coordinate(latitude=float(location["lat"]), longitude=float(location["lng"]))
    return PlaceRecord(
        coordinate=coordinate,
        title=result.get("name") or "",
        address=result.get("vicinity"),
        rating=result.get("rating"),
        review_count=result.get("user_ratings_total"),
        image_ref=DEFAULT_IMAGE_REF,
    )


def _mock_places(req: PlacesSearchRequest) -> PlacesSearchResponse:
    # Deterministic ring of places inside the search radius.
    names = ["Central Station WC", "Park Pavilion Restroom", "Library Toilets", "Market Hall WC"]
    records = []
    for idx, name in enumerate(names):
        angle = idx * (2 * math.pi / len(names))
        distance_deg = (req.radius_m / 2) / 111_320
        records.append(
            PlaceRecord(
                coordinate=Coordinate(
                    latitude=round(req.latitude + distance_deg * math.sin(angle), 6),
                    longitude=round(req.longitude + distance_deg * math.cos(angle), 6),
                ),
                title=name,
                address=f"{idx + 1} Sample Street",
                rating=round(3.5 + 0.4 * idx, 1),
                review_count=10 * (idx + 1),
                image_ref=DEFAULT_IMAGE_REF,
            )
        )
    return PlacesSearchResponse(records=records)


async def _fetch_places(req: PlacesSearchRequest, api_key: str) -> PlacesSearchResponse:
    params = {
        "location": f"{req.latitude},{req.longitude}",
        "radius": req.radius_m,
        "keyword": req.keyword,
        "key": api_key,
    }
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.get(NEARBY_SEARCH_URL, params=params)
            resp.raise_for_status()
        data = resp.json()
        status = data.get("status")
        if status not in (None, "OK", "ZERO_RESULTS"):
            logger.warning("Places search returned status %s: %s", status, data.get("error_message"))
            return PlacesSearchResponse(records=[])
        results = data.get("results") or []
        return PlacesSearchResponse(records=[_to_record(result) for result in results])
    except Exception as exc:
        logger.warning("Places search failed near (%s, %s): %s", req.latitude, req.longitude, exc)
        return PlacesSearchResponse(records=[])


async def search_places(req: PlacesSearchRequest, api_key: Optional[str] = None) -> PlacesSearchResponse:
    """
    Nearby toilet search via the Google Places API. Without an API key a
    deterministic mock batch around the request location is returned.
    """
    if not api_key:
        return _mock_places(req)
    return await _fetch_places(req, api_key)
