"""
Pydantic models for IIIF Image API 3.0.

Request parameters (region, size, rotation) are closed tagged unions keyed on
``type``; consumers match on the discriminant rather than on subclasses. The
``info.json`` document and the tile/size descriptors use the camelCase JSON
names as aliases, so ``model_dump(by_alias=True)`` yields wire-ready JSON.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import IMAGE_API_CONTEXT, IMAGE_API_PROTOCOL, ImageApiProfile


# ---------------------------------------------------------------------------
# Region
# ---------------------------------------------------------------------------


class FullRegion(BaseModel):
    """The complete image (``full``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["full"] = "full"


class SquareRegion(BaseModel):
    """Centred square whose side is the shorter image dimension (``square``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["square"] = "square"


class PixelRegion(BaseModel):
    """Region given in absolute pixels (``x,y,w,h``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["pixels"] = "pixels"
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    w: int = Field(gt=0)
    h: int = Field(gt=0)


class PercentRegion(BaseModel):
    """Region given as percentages of the full image (``pct:x,y,w,h``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["percent"] = "percent"
    x: float = Field(ge=0)
    y: float = Field(ge=0)
    w: float = Field(gt=0)
    h: float = Field(gt=0)


RegionParams = Annotated[
    Union[FullRegion, SquareRegion, PixelRegion, PercentRegion],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


class MaxSize(BaseModel):
    """Largest size the server allows (``max``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["max"] = "max"
    upscale: bool = False


class WidthSize(BaseModel):
    """Exact width, height scaled to keep the aspect ratio (``w,``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["width"] = "width"
    width: int = Field(gt=0)
    upscale: bool = False


class HeightSize(BaseModel):
    """Exact height, width scaled to keep the aspect ratio (``,h``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["height"] = "height"
    height: int = Field(gt=0)
    upscale: bool = False


class PercentSize(BaseModel):
    """Scale both dimensions by a percentage (``pct:n``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["percent"] = "percent"
    percent: float = Field(gt=0)
    upscale: bool = False


class WidthHeightSize(BaseModel):
    """Exact width and height, possibly distorting (``w,h``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["widthHeight"] = "widthHeight"
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    upscale: bool = False


class ConfinedSize(BaseModel):
    """Best fit inside a ``w`` x ``h`` box keeping the aspect ratio (``!w,h``)."""

    model_config = ConfigDict(frozen=True)

    type: Literal["confined"] = "confined"
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    confined: Literal[True] = True
    upscale: bool = False


SizeParams = Annotated[
    Union[MaxSize, WidthSize, HeightSize, PercentSize, WidthHeightSize, ConfinedSize],
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Rotation and complete requests
# ---------------------------------------------------------------------------


class RotationParams(BaseModel):
    """Clockwise rotation in degrees, optionally mirrored first."""

    model_config = ConfigDict(frozen=True)

    degrees: float = Field(ge=0, le=360)
    mirror: bool = False


class ImageRequestParams(BaseModel):
    """
    The five path segments of an image request.

    Region, size and rotation may be given pre-parsed or as raw strings;
    quality and format are always bare tokens.
    """

    model_config = ConfigDict(frozen=True)

    region: str | FullRegion | SquareRegion | PixelRegion | PercentRegion = "full"
    size: str | MaxSize | WidthSize | HeightSize | PercentSize | WidthHeightSize | ConfinedSize = "max"
    rotation: str | RotationParams = "0"
    quality: str = "default"
    format: str = "jpg"


# ---------------------------------------------------------------------------
# Tiles and sizes
# ---------------------------------------------------------------------------


class SizeInfo(BaseModel):
    """A pre-computed size offered in ``info.json`` ``sizes``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Literal["Size"] | None = None
    width: int
    height: int


class TileInfo(BaseModel):
    """One tile configuration from ``info.json`` ``tiles``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Literal["Tile"] | None = None
    width: int
    height: int | None = None
    scale_factors: list[int] = Field(alias="scaleFactors")


class TileRequest(BaseModel):
    """
    One tile at one scale.

    ``x``/``y``/``width``/``height`` are the region in full-image pixels;
    the delivered tile is that region divided by ``scale_factor``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    x: int
    y: int
    width: int
    height: int
    scale_factor: int = Field(alias="scaleFactor")


class TileCount(BaseModel):
    """Tile grid dimensions at one scale factor."""

    model_config = ConfigDict(frozen=True)

    columns: int
    rows: int


# ---------------------------------------------------------------------------
# Service descriptions
# ---------------------------------------------------------------------------


class ImageServiceInfo(BaseModel):
    """
    IIIF Image API 3.0 image information document (``info.json``).

    Unknown properties such as ``partOf``, ``seeAlso`` or ``service`` are
    preserved as extras.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    context: str | list[Any] = Field(default=IMAGE_API_CONTEXT, alias="@context")
    id: str
    type: Literal["ImageService3"] = "ImageService3"
    protocol: Literal["http://iiif.io/api/image"] = IMAGE_API_PROTOCOL
    profile: ImageApiProfile
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    max_width: int | None = Field(default=None, alias="maxWidth", gt=0)
    max_height: int | None = Field(default=None, alias="maxHeight", gt=0)
    max_area: int | None = Field(default=None, alias="maxArea", gt=0)
    sizes: list[SizeInfo] | None = None
    tiles: list[TileInfo] | None = None
    preferred_formats: list[str] | None = Field(default=None, alias="preferredFormats")
    extra_formats: list[str] | None = Field(default=None, alias="extraFormats")
    extra_qualities: list[str] | None = Field(default=None, alias="extraQualities")
    extra_features: list[str] | None = Field(default=None, alias="extraFeatures")
    rights: str | None = None

    def to_json(self) -> dict[str, Any]:
        """
        Serialize to an ``info.json`` dictionary.

        Uses the JSON property names and omits unset optional properties.

        Example:
            >>> info = ImageServiceInfo(id="https://iiif.example.org/img", profile="level0", width=10, height=10)
            >>> info.to_json()["@context"]
            'http://iiif.io/api/image/3/context.json'
        """
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ImageServiceReference(BaseModel):
    """Minimal image service pointer embedded in a canvas or other resource."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    type: Literal["ImageService3"] = "ImageService3"
    protocol: Literal["http://iiif.io/api/image"] = IMAGE_API_PROTOCOL
    profile: ImageApiProfile = "level2"
    width: int | None = None
    height: int | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
