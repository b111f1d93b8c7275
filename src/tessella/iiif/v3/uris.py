"""
Serialization of IIIF Image API 3.0 request URIs.

The ``format_*`` functions are the inverse of the validators in
``params``: they turn structured parameters back into canonical path
segments. ``build_image_uri`` joins them as
``{base}/{region}/{size}/{rotation}/{quality}.{format}``.
"""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Mapping
from urllib.parse import quote, unquote

from .constants import FORMAT_MIME_TYPES, IMAGE_URI_RE, MIME_TO_FORMAT
from .models import (
    ConfinedSize,
    FullRegion,
    HeightSize,
    ImageRequestParams,
    MaxSize,
    PercentRegion,
    PercentSize,
    PixelRegion,
    RotationParams,
    SizeInfo,
    SquareRegion,
    WidthHeightSize,
    WidthSize,
)
from .results import ParsedImageUri

# encodeURIComponent leaves these unescaped
_IDENTIFIER_SAFE = "-_.!~*'()"


def format_number(value: int | float) -> str:
    """
    Format a number the way it appears in a request URI.

    Integral values drop the fractional part and no exponent notation is
    used, so ``50.0`` becomes ``"50"`` and ``1e-05`` becomes ``"0.00001"``.
    """
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_region(region: FullRegion | SquareRegion | PixelRegion | PercentRegion) -> str:
    """Format a structured region as ``full``, ``square``, ``x,y,w,h`` or ``pct:x,y,w,h``."""
    if region.type == "full":
        return "full"
    if region.type == "square":
        return "square"
    if region.type == "pixels":
        return f"{region.x},{region.y},{region.w},{region.h}"
    if region.type == "percent":
        coords = ",".join(format_number(v) for v in (region.x, region.y, region.w, region.h))
        return f"pct:{coords}"
    raise TypeError(f"Unknown region type: {region.type!r}")


def format_size(
    size: MaxSize | WidthSize | HeightSize | PercentSize | WidthHeightSize | ConfinedSize,
) -> str:
    """Format a structured size, including the ``^`` upscale prefix."""
    prefix = "^" if size.upscale else ""

    if size.type == "max":
        return f"{prefix}max"
    if size.type == "width":
        return f"{prefix}{size.width},"
    if size.type == "height":
        return f"{prefix},{size.height}"
    if size.type == "percent":
        return f"{prefix}pct:{format_number(size.percent)}"
    if size.type == "widthHeight":
        return f"{prefix}{size.width},{size.height}"
    if size.type == "confined":
        return f"{prefix}!{size.width},{size.height}"
    raise TypeError(f"Unknown size type: {size.type!r}")


def format_rotation(rotation: RotationParams) -> str:
    """Format a rotation, prefixing ``!`` when mirrored."""
    prefix = "!" if rotation.mirror else ""
    return f"{prefix}{format_number(rotation.degrees)}"


def request_segments(params: ImageRequestParams) -> tuple[str, str, str]:
    """Return the region, size and rotation segments, formatting parsed values."""
    region = params.region if isinstance(params.region, str) else format_region(params.region)
    size = params.size if isinstance(params.size, str) else format_size(params.size)
    rotation = (
        params.rotation if isinstance(params.rotation, str) else format_rotation(params.rotation)
    )
    return region, size, rotation


def build_image_uri(base_uri: str, params: ImageRequestParams | Mapping[str, object]) -> str:
    """
    Build an image request URI.

    Parameters:
        base_uri: Service base URI, ``{scheme}://{server}/{prefix}/{identifier}``
        params: Request segments; region, size and rotation may be parsed values

    Returns:
        Full image request URI

    Example:
        >>> build_image_uri(
        ...     "https://example.com/iiif/image1",
        ...     ImageRequestParams(region="full", size="max", rotation="0",
        ...                        quality="default", format="jpg"),
        ... )
        'https://example.com/iiif/image1/full/max/0/default.jpg'
    """
    if isinstance(params, Mapping):
        params = ImageRequestParams.model_validate(params)
    region, size, rotation = request_segments(params)
    return f"{base_uri}/{region}/{size}/{rotation}/{params.quality}.{params.format}"


def build_info_uri(base_uri: str) -> str:
    """Build the ``info.json`` URI for a service base URI."""
    return f"{base_uri}/info.json"


def parse_image_uri(uri: str) -> ParsedImageUri | None:
    """
    Split an image request URI into its segments.

    Matches ``{base}/{identifier}/{region}/{size}/{rotation}/{quality}.{format}``
    with a shortest-possible ``base``. The match is positional: for
    ``http://example.com/image1/full/max/0/default.jpg`` the host is taken as
    the identifier and ``quality`` comes back as ``"0/default"``. Callers
    relying on exact segments should hold on to the structured request
    instead of re-parsing.

    Returns:
        ParsedImageUri, or None when the string does not have that shape
    """
    m = IMAGE_URI_RE.match(uri)
    if m is None:
        return None

    base, identifier, region, size, rotation, quality, fmt = m.groups()
    return ParsedImageUri(
        base_uri=f"{base}/{identifier}",
        identifier=identifier,
        region=region,
        size=size,
        rotation=rotation,
        quality=quality,
        format=fmt,
    )


def encode_identifier(identifier: str) -> str:
    """Percent-encode an identifier for use as a single path segment."""
    return quote(identifier, safe=_IDENTIFIER_SAFE)


def decode_identifier(encoded: str) -> str:
    """
    Reverse ``encode_identifier``.

    Raises:
        UnicodeDecodeError: If the escapes do not decode to UTF-8
    """
    return unquote(encoded, errors="strict")


def get_image_mime_type(fmt: str) -> str | None:
    return FORMAT_MIME_TYPES.get(fmt)


def get_format_from_mime(mime_type: str) -> str | None:
    return MIME_TO_FORMAT.get(mime_type)


def calculate_resulting_size(
    region_width: int,
    region_height: int,
    size: MaxSize | WidthSize | HeightSize | PercentSize | WidthHeightSize | ConfinedSize,
) -> SizeInfo:
    """
    Compute the pixel size a size parameter produces for a region.

    Scaled dimensions are rounded half up.

    Example:
        >>> calculate_resulting_size(1000, 800, ConfinedSize(width=500, height=500))
        SizeInfo(type=None, width=500, height=400)
    """
    if size.type == "max":
        return SizeInfo(width=region_width, height=region_height)
    if size.type == "width":
        return SizeInfo(
            width=size.width,
            height=round_half_up(size.width * region_height / region_width),
        )
    if size.type == "height":
        return SizeInfo(
            width=round_half_up(size.height * region_width / region_height),
            height=size.height,
        )
    if size.type == "percent":
        return SizeInfo(
            width=round_half_up(region_width * size.percent / 100),
            height=round_half_up(region_height * size.percent / 100),
        )
    if size.type == "widthHeight":
        return SizeInfo(width=size.width, height=size.height)
    if size.type == "confined":
        scale = min(size.width / region_width, size.height / region_height)
        return SizeInfo(
            width=round_half_up(region_width * scale),
            height=round_half_up(region_height * scale),
        )
    raise TypeError(f"Unknown size type: {size.type!r}")
