import sys
from pathlib import Path

import pytest

# Ensure `nearby_places` is importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def make_listing(name="Joe's Pizza", place_id="pid-1", types=None):
    return {
        "business_status": "OPERATIONAL",
        "geometry": {
            "location": {"lat": 40.7, "lng": -74.0},
            "viewport": {
                "northeast": {"lat": 40.71, "lng": -73.99},
                "southwest": {"lat": 40.69, "lng": -74.01},
            },
        },
        "name": name,
        "place_id": place_id,
        "reference": f"ref-{place_id}",
        "types": types if types is not None else ["restaurant", "food"],
        "vicinity": "7 Carmine St, New York",
    }


@pytest.fixture
def listing_factory():
    return make_listing


@pytest.fixture
def upstream_payload():
    return {"next_page_token": "token-1", "results": [make_listing()]}
