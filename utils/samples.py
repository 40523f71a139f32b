"""
Sample image provider
Pulls a few demo images from Google Custom Search, falling back to a fixed set
"""
import logging
import random
from dataclasses import asdict, dataclass
from typing import Dict, List

import requests

logger = logging.getLogger(__name__)

GOOGLE_CSE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
SAMPLE_COUNT = 3
SEARCH_TIMEOUT = 10  # seconds

SEARCH_TERMS = [
    "portrait",
    "street photo",
    "nature landscape",
    "product photo",
    "event photo",
]


@dataclass(frozen=True)
class SampleImage:
    url: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


FALLBACK_IMAGES = [
    SampleImage(
        url="https://images.unsplash.com/photo-1524504388940-b1c1722653e1?auto=format&fit=crop&w=900&q=80",
        title="Portrait sample",
    ),
    SampleImage(
        url="https://images.unsplash.com/photo-1433838552652-f9a46b332c40?auto=format&fit=crop&w=900&q=80",
        title="City street sample",
    ),
    SampleImage(
        url="https://images.unsplash.com/photo-1501785888041-af3ef285b470?auto=format&fit=crop&w=900&q=80",
        title="Nature sample",
    ),
]


def _get_credentials():
    from config import Config
    return Config.GOOGLE_CSE_API_KEY, Config.GOOGLE_CSE_CX


def get_sample_images() -> List[SampleImage]:
    """
    Fetch sample images for the demo

    Returns:
        Up to three images from an image search, or the fallback set when
        credentials are missing or the search fails
    """
    api_key, cx = _get_credentials()
    if not api_key or not cx:
        logger.debug("GOOGLE_CSE_API_KEY/GOOGLE_CSE_CX not configured, using fallback samples")
        return list(FALLBACK_IMAGES)

    params = {
        'key': api_key,
        'cx': cx,
        'q': random.choice(SEARCH_TERMS),
        'searchType': 'image',
        'num': str(SAMPLE_COUNT),
        'safe': 'active',
        'start': str(random.randint(1, 29)),
    }

    try:
        response = requests.get(GOOGLE_CSE_ENDPOINT, params=params, timeout=SEARCH_TIMEOUT)
        response.raise_for_status()
        items = (response.json().get('items') or [])[:SAMPLE_COUNT]
    except requests.exceptions.RequestException as e:
        logger.warning(f"⚠️ Failed to fetch Google images: {e}")
        return list(FALLBACK_IMAGES)
    except ValueError as e:
        logger.warning(f"⚠️ Google image search returned invalid JSON: {e}")
        return list(FALLBACK_IMAGES)

    samples = [
        SampleImage(url=item['link'], title=item.get('title') or f"Sample image {index + 1}")
        for index, item in enumerate(items)
        if item.get('link')
    ]
    return samples or list(FALLBACK_IMAGES)
