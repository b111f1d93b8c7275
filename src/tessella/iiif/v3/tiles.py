"""
Tile geometry for deep-zoom viewers.

A tile at scale factor ``s`` covers a ``tile_width * s`` by
``tile_height * s`` region of the full image and is delivered at
``tile_width`` by ``tile_height`` pixels. Tiles on the right and bottom
edges are clipped to the image.

Example:
    >>> calculate_tile_count(2000, 1500, 512, 512, 1)
    TileCount(columns=4, rows=3)
    >>> uris = get_all_tile_uris("https://example.org/iiif/img", 1024, 1024, 512, 512, 1)
    >>> uris[0]
    'https://example.org/iiif/img/0,0,512,512/512,512/0/default.jpg'
"""

from __future__ import annotations

import math
from typing import Iterator

from .models import (
    ImageRequestParams,
    ImageServiceInfo,
    PixelRegion,
    TileCount,
    TileRequest,
    WidthHeightSize,
)
from .uris import build_image_uri

DEFAULT_TILE_SIZE = 512
DEFAULT_SCALE_FACTORS: tuple[int, ...] = (1, 2, 4, 8)

# Deepest pyramid level calculate_scale_factors will produce
MAX_PYRAMID_LEVEL = 20


def _require_positive(**values: int) -> None:
    for name, value in values.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")


def calculate_tile_request(
    image_width: int,
    image_height: int,
    tile_width: int,
    tile_height: int,
    scale_factor: int,
    tile_x: int,
    tile_y: int,
) -> TileRequest:
    """
    Compute the full-image region covered by one grid cell.

    Parameters:
        image_width: Full image width in pixels
        image_height: Full image height in pixels
        tile_width: Delivered tile width
        tile_height: Delivered tile height
        scale_factor: Zoom divisor (1 = full resolution)
        tile_x: Column index
        tile_y: Row index

    Returns:
        TileRequest whose width/height never extend past the image

    Raises:
        ValueError: If any dimension or the scale factor is not positive
    """
    _require_positive(
        image_width=image_width,
        image_height=image_height,
        tile_width=tile_width,
        tile_height=tile_height,
        scale_factor=scale_factor,
    )

    x = tile_x * tile_width * scale_factor
    y = tile_y * tile_height * scale_factor
    width = min(tile_width * scale_factor, image_width - x)
    height = min(tile_height * scale_factor, image_height - y)

    return TileRequest(x=x, y=y, width=width, height=height, scale_factor=scale_factor)


def calculate_tile_count(
    image_width: int,
    image_height: int,
    tile_width: int,
    tile_height: int,
    scale_factor: int,
) -> TileCount:
    """Number of tile columns and rows needed to cover the image at one scale."""
    _require_positive(
        image_width=image_width,
        image_height=image_height,
        tile_width=tile_width,
        tile_height=tile_height,
        scale_factor=scale_factor,
    )
    return TileCount(
        columns=math.ceil(image_width / (tile_width * scale_factor)),
        rows=math.ceil(image_height / (tile_height * scale_factor)),
    )


def build_tile_uri(
    base_uri: str,
    tile: TileRequest,
    fmt: str = "jpg",
    quality: str = "default",
) -> str:
    """
    Build the image request URI for one tile.

    The region is the tile's full-image rectangle; the size is that
    rectangle divided by the scale factor, rounded up.
    """
    region = PixelRegion(x=tile.x, y=tile.y, w=tile.width, h=tile.height)
    size = WidthHeightSize(
        width=math.ceil(tile.width / tile.scale_factor),
        height=math.ceil(tile.height / tile.scale_factor),
    )
    params = ImageRequestParams(
        region=region, size=size, rotation="0", quality=quality, format=fmt
    )
    return build_image_uri(base_uri, params)


def iter_tile_requests(
    image_width: int,
    image_height: int,
    tile_width: int,
    tile_height: int,
    scale_factor: int,
) -> Iterator[TileRequest]:
    """Yield every tile of the grid at one scale, row by row."""
    count = calculate_tile_count(image_width, image_height, tile_width, tile_height, scale_factor)
    for tile_y in range(count.rows):
        for tile_x in range(count.columns):
            yield calculate_tile_request(
                image_width, image_height, tile_width, tile_height, scale_factor, tile_x, tile_y
            )


def get_all_tile_uris(
    base_uri: str,
    image_width: int,
    image_height: int,
    tile_width: int,
    tile_height: int,
    scale_factor: int,
    fmt: str = "jpg",
    quality: str = "default",
) -> list[str]:
    """
    List the URI of every tile at one scale factor in row-major order.

    Example:
        >>> len(get_all_tile_uris("https://example.org/iiif/img", 1024, 1024, 512, 512, 1))
        4
    """
    return [
        build_tile_uri(base_uri, tile, fmt, quality)
        for tile in iter_tile_requests(
            image_width, image_height, tile_width, tile_height, scale_factor
        )
    ]


def calculate_max_level(width: int, height: int) -> int:
    """
    Number of times the image can be halved before a side reaches one pixel.

    Example:
        >>> calculate_max_level(8000, 6000)
        12
    """
    if width <= 0 or height <= 0:
        return 0

    level = 0
    while width > 1 and height > 1:
        width //= 2
        height //= 2
        level += 1
    return level


def calculate_scale_factors(
    width: int,
    height: int,
    tile_size: int = DEFAULT_TILE_SIZE,
) -> list[int]:
    """
    Power-of-two scale factors for a tile pyramid.

    Stops at the first factor where the whole image fits in a single tile.

    Example:
        >>> calculate_scale_factors(2000, 1500, 512)
        [1, 2, 4]
    """
    _require_positive(width=width, height=height, tile_size=tile_size)

    max_level = min(calculate_max_level(width, height), MAX_PYRAMID_LEVEL)
    factors: list[int] = []
    for level in range(max_level + 1):
        factor = 2**level
        factors.append(factor)
        if width <= tile_size * factor and height <= tile_size * factor:
            break
    return factors


def get_info_tile_uris(
    info: ImageServiceInfo,
    fmt: str = "jpg",
    quality: str = "default",
    *,
    scale_factor: int | None = None,
) -> list[str]:
    """
    List every tile URI an ``info.json`` advertises.

    Walks each tile configuration and each of its scale factors, using the
    document ``id`` as base URI. A configuration without ``height`` uses
    square tiles.

    Parameters:
        info: Service description with ``tiles``
        fmt: Image format
        quality: Image quality
        scale_factor: Only include tiles at this scale factor
    """
    uris: list[str] = []
    base_uri = info.id.rstrip("/")
    for tile_info in info.tiles or []:
        tile_height = tile_info.height or tile_info.width
        for factor in tile_info.scale_factors:
            if scale_factor is not None and factor != scale_factor:
                continue
            uris.extend(
                get_all_tile_uris(
                    base_uri,
                    info.width,
                    info.height,
                    tile_info.width,
                    tile_height,
                    factor,
                    fmt,
                    quality,
                )
            )
    return uris
