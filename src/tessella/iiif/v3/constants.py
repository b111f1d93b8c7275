"""
Static tables for IIIF Image API 3.0.

Context and protocol URIs, the cumulative compliance level tables, MIME type
maps and the request parameter grammar. Everything here is read-only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

IMAGE_API_CONTEXT = "http://iiif.io/api/image/3/context.json"
IMAGE_API_PROTOCOL = "http://iiif.io/api/image"
IMAGE_SERVICE_TYPE = "ImageService3"

ImageApiProfile = Literal["level0", "level1", "level2"]

PROFILES: tuple[str, ...] = ("level0", "level1", "level2")
QUALITIES: tuple[str, ...] = ("default", "color", "gray", "bitonal")
FORMATS: tuple[str, ...] = ("jpg", "tif", "png", "gif", "jp2", "pdf", "webp")


@dataclass(frozen=True)
class ComplianceLevel:
    """
    Requirements mandated by one compliance level.

    Attributes:
        uri: Profile document URI
        features: Features a server at this level must support
        formats: Formats a server at this level must support
        qualities: Qualities a server at this level must support
    """

    uri: str
    features: tuple[str, ...]
    formats: tuple[str, ...]
    qualities: tuple[str, ...]


COMPLIANCE_LEVELS: Mapping[str, ComplianceLevel] = MappingProxyType(
    {
        "level0": ComplianceLevel(
            uri="http://iiif.io/api/image/3/level0.json",
            features=(),
            formats=("jpg",),
            qualities=("default",),
        ),
        "level1": ComplianceLevel(
            uri="http://iiif.io/api/image/3/level1.json",
            features=("regionByPx", "regionSquare", "sizeByW", "sizeByH", "sizeByWh"),
            formats=("jpg",),
            qualities=("default",),
        ),
        "level2": ComplianceLevel(
            uri="http://iiif.io/api/image/3/level2.json",
            features=(
                "regionByPct",
                "regionByPx",
                "regionSquare",
                "sizeByConfinedWh",
                "sizeByH",
                "sizeByPct",
                "sizeByW",
                "sizeByWh",
                "rotationBy90s",
            ),
            formats=("jpg", "png"),
            qualities=("default", "color", "gray", "bitonal"),
        ),
    }
)

FORMAT_MIME_TYPES: Mapping[str, str] = MappingProxyType(
    {
        "jpg": "image/jpeg",
        "tif": "image/tiff",
        "png": "image/png",
        "gif": "image/gif",
        "jp2": "image/jp2",
        "pdf": "application/pdf",
        "webp": "image/webp",
    }
)

MIME_TO_FORMAT: Mapping[str, str] = MappingProxyType(
    {mime: fmt for fmt, mime in FORMAT_MIME_TYPES.items()}
)

FEATURE_DESCRIPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "baseUriRedirect": "Base URI redirects to image information document",
        "canonicalLinkHeader": "Canonical image URI HTTP link header provided on image responses",
        "cors": "CORS HTTP headers provided on all responses",
        "jsonldMediaType": "JSON-LD media type provided when requested",
        "mirroring": "Image may be mirrored on vertical axis",
        "profileLinkHeader": "Profile HTTP link header provided on image responses",
        "regionByPct": "Regions may be requested by percentage",
        "regionByPx": "Regions may be requested by pixel dimensions",
        "regionSquare": "Square region may be requested",
        "rotationArbitrary": "Rotation may be requested using non-90 degree values",
        "rotationBy90s": "Rotation may be requested in multiples of 90 degrees",
        "sizeByConfinedWh": "Size may be requested in !w,h form",
        "sizeByH": "Size may be requested in ,h form",
        "sizeByPct": "Size may be requested in pct:n form",
        "sizeByW": "Size may be requested in w, form",
        "sizeByWh": "Size may be requested in w,h form",
        "sizeUpscaling": "Size prefixed with ^ may be requested",
    }
)

FEATURES: frozenset[str] = frozenset(FEATURE_DESCRIPTIONS)

# Request parameter grammar
_DECIMAL = r"(\d+(?:\.\d*)?)"

REGION_PIXELS_RE = re.compile(r"^(\d+),(\d+),(\d+),(\d+)$")
REGION_PERCENT_RE = re.compile(rf"^pct:{_DECIMAL},{_DECIMAL},{_DECIMAL},{_DECIMAL}$")

SIZE_WIDTH_RE = re.compile(r"^(\d+),$")
SIZE_HEIGHT_RE = re.compile(r"^,(\d+)$")
SIZE_PERCENT_RE = re.compile(rf"^pct:{_DECIMAL}$")
SIZE_WIDTH_HEIGHT_RE = re.compile(r"^(\d+),(\d+)$")
SIZE_CONFINED_RE = re.compile(r"^!(\d+),(\d+)$")

ROTATION_RE = re.compile(rf"^!?{_DECIMAL}$")

QUALITY_RE = re.compile(r"^(default|color|gray|bitonal)$")
FORMAT_RE = re.compile(r"^(jpg|tif|png|gif|jp2|pdf|webp)$")

# {base}/{identifier}/{region}/{size}/{rotation}/{quality}.{format}
IMAGE_URI_RE = re.compile(
    r"^(.+?)/([^/]+)/([^/]+)/([^/]+)/([^/]+)/([^.]+)\.(\w+)$", re.ASCII
)
