"""
Validation of IIIF Image API 3.0 request parameters.

Each validator parses one raw path segment into its structured form and
checks it against the numeric ranges and the capabilities the caller
declares. Validators never raise; problems are reported through
``ParamResult.error`` so callers can surface them directly.

Example:
    >>> result = validate_size("!400,300")
    >>> result.valid, result.parsed.type
    (True, 'confined')
    >>> validate_rotation("45").error
    'Only 90-degree rotations are supported'
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from .constants import (
    COMPLIANCE_LEVELS,
    FORMAT_RE,
    PROFILES,
    QUALITY_RE,
    REGION_PERCENT_RE,
    REGION_PIXELS_RE,
    ROTATION_RE,
    SIZE_CONFINED_RE,
    SIZE_HEIGHT_RE,
    SIZE_PERCENT_RE,
    SIZE_WIDTH_HEIGHT_RE,
    SIZE_WIDTH_RE,
)
from .info import is_positive_number
from .models import (
    ConfinedSize,
    FullRegion,
    HeightSize,
    ImageRequestParams,
    ImageServiceInfo,
    MaxSize,
    PercentRegion,
    PercentSize,
    PixelRegion,
    RotationParams,
    SquareRegion,
    WidthHeightSize,
    WidthSize,
)
from .results import ParamResult, ValidationReport
from .uris import request_segments

RegionResult = ParamResult[Union[FullRegion, SquareRegion, PixelRegion, PercentRegion]]
SizeResult = ParamResult[
    Union[MaxSize, WidthSize, HeightSize, PercentSize, WidthHeightSize, ConfinedSize]
]


def validate_region(
    region: str,
    image_width: int | None = None,
    image_height: int | None = None,
) -> RegionResult:
    """
    Validate a region segment.

    Accepts ``full``, ``square``, ``x,y,w,h`` and ``pct:x,y,w,h``. When the
    image dimensions are known, pixel regions starting outside the image are
    rejected.

    Parameters:
        region: Raw region segment
        image_width: Full image width, if known
        image_height: Full image height, if known

    Returns:
        ParamResult with the parsed region or an error message
    """
    if region == "full":
        return ParamResult(valid=True, parsed=FullRegion())

    if region == "square":
        return ParamResult(valid=True, parsed=SquareRegion())

    m = REGION_PIXELS_RE.match(region)
    if m:
        x, y, w, h = (int(g) for g in m.groups())
        if w <= 0 or h <= 0:
            return ParamResult(valid=False, error="Region width and height must be greater than 0")
        if image_width is not None and image_height is not None:
            if x >= image_width or y >= image_height:
                return ParamResult(valid=False, error="Region is entirely outside image bounds")
        return ParamResult(valid=True, parsed=PixelRegion(x=x, y=y, w=w, h=h))

    m = REGION_PERCENT_RE.match(region)
    if m:
        x, y, w, h = (float(g) for g in m.groups())
        if w <= 0 or h <= 0:
            return ParamResult(
                valid=False,
                error="Region percentage width and height must be greater than 0",
            )
        return ParamResult(valid=True, parsed=PercentRegion(x=x, y=y, w=w, h=h))

    return ParamResult(valid=False, error=f"Invalid region syntax: {region}")


def validate_size(
    size: str,
    region_width: int | None = None,
    region_height: int | None = None,
    supports_upscale: bool = False,
) -> SizeResult:
    """
    Validate a size segment.

    Accepts ``max``, ``w,``, ``,h``, ``pct:n``, ``w,h`` and ``!w,h``, each
    optionally prefixed with ``^``. Without ``^`` the requested size may not
    exceed the region dimensions (when given) or 100 percent.

    Parameters:
        size: Raw size segment
        region_width: Width of the requested region, if known
        region_height: Height of the requested region, if known
        supports_upscale: Whether the service accepts the ``^`` prefix

    Returns:
        ParamResult with the parsed size or an error message
    """
    upscale = size.startswith("^")
    body = size[1:] if upscale else size

    if upscale and not supports_upscale:
        return ParamResult(valid=False, error="Upscaling (^ prefix) is not supported")

    if body == "max":
        return ParamResult(valid=True, parsed=MaxSize(upscale=upscale))

    m = SIZE_WIDTH_RE.match(body)
    if m:
        width = int(m.group(1))
        if width <= 0:
            return ParamResult(valid=False, error="Size width must be greater than 0")
        if not upscale and region_width is not None and width > region_width:
            return ParamResult(
                valid=False,
                error="Requested width exceeds region width without upscale prefix",
            )
        return ParamResult(valid=True, parsed=WidthSize(width=width, upscale=upscale))

    m = SIZE_HEIGHT_RE.match(body)
    if m:
        height = int(m.group(1))
        if height <= 0:
            return ParamResult(valid=False, error="Size height must be greater than 0")
        if not upscale and region_height is not None and height > region_height:
            return ParamResult(
                valid=False,
                error="Requested height exceeds region height without upscale prefix",
            )
        return ParamResult(valid=True, parsed=HeightSize(height=height, upscale=upscale))

    m = SIZE_PERCENT_RE.match(body)
    if m:
        percent = float(m.group(1))
        if percent <= 0:
            return ParamResult(valid=False, error="Size percentage must be greater than 0")
        if not upscale and percent > 100:
            return ParamResult(
                valid=False,
                error="Percentage exceeds 100% without upscale prefix",
            )
        return ParamResult(valid=True, parsed=PercentSize(percent=percent, upscale=upscale))

    m = SIZE_CONFINED_RE.match(body)
    if m:
        width, height = int(m.group(1)), int(m.group(2))
        if width <= 0 or height <= 0:
            return ParamResult(valid=False, error="Size width and height must be greater than 0")
        return ParamResult(
            valid=True,
            parsed=ConfinedSize(width=width, height=height, upscale=upscale),
        )

    m = SIZE_WIDTH_HEIGHT_RE.match(body)
    if m:
        width, height = int(m.group(1)), int(m.group(2))
        if width <= 0 or height <= 0:
            return ParamResult(valid=False, error="Size width and height must be greater than 0")
        if not upscale and region_width is not None and region_height is not None:
            if width > region_width or height > region_height:
                return ParamResult(
                    valid=False,
                    error="Requested dimensions exceed region dimensions without upscale prefix",
                )
        return ParamResult(
            valid=True,
            parsed=WidthHeightSize(width=width, height=height, upscale=upscale),
        )

    return ParamResult(valid=False, error=f"Invalid size syntax: {size}")


def validate_rotation(
    rotation: str,
    supports_arbitrary: bool = False,
    supports_mirror: bool = True,
) -> ParamResult[RotationParams]:
    """
    Validate a rotation segment (``n`` or ``!n``).

    Parameters:
        rotation: Raw rotation segment
        supports_arbitrary: Whether non-multiples of 90 are accepted
        supports_mirror: Whether the ``!`` mirror prefix is accepted

    Returns:
        ParamResult with the parsed rotation or an error message
    """
    m = ROTATION_RE.match(rotation)
    if not m:
        return ParamResult(valid=False, error=f"Invalid rotation syntax: {rotation}")

    mirror = rotation.startswith("!")
    degrees = float(m.group(1))

    if mirror and not supports_mirror:
        return ParamResult(valid=False, error="Mirroring is not supported")

    if degrees < 0 or degrees > 360:
        return ParamResult(valid=False, error="Rotation must be between 0 and 360 degrees")

    if not supports_arbitrary and degrees % 90 != 0:
        return ParamResult(valid=False, error="Only 90-degree rotations are supported")

    return ParamResult(valid=True, parsed=RotationParams(degrees=degrees, mirror=mirror))


def validate_quality(
    quality: str,
    supported: Iterable[str] = ("default",),
) -> ParamResult[None]:
    """Check a quality token against the vocabulary and the supported set."""
    if not QUALITY_RE.match(quality):
        return ParamResult(valid=False, error=f"Invalid quality: {quality}")

    supported = list(supported)
    if quality not in supported:
        return ParamResult(
            valid=False,
            error=f'Quality "{quality}" not supported. Supported: {", ".join(supported)}',
        )
    return ParamResult(valid=True)


def validate_format(
    fmt: str,
    supported: Iterable[str] = ("jpg",),
) -> ParamResult[None]:
    """Check a format token against the vocabulary and the supported set."""
    if not FORMAT_RE.match(fmt):
        return ParamResult(valid=False, error=f"Invalid format: {fmt}")

    supported = list(supported)
    if fmt not in supported:
        return ParamResult(
            valid=False,
            error=f'Format "{fmt}" not supported. Supported: {", ".join(supported)}',
        )
    return ParamResult(valid=True)


def _declared(info: ImageServiceInfo | Mapping[str, Any] | None, key: str, attr: str) -> Any:
    if info is None:
        return None
    if isinstance(info, Mapping):
        return info.get(key)
    return getattr(info, attr, None)


def _declared_tokens(
    info: ImageServiceInfo | Mapping[str, Any] | None, key: str, attr: str
) -> list[str]:
    values = _declared(info, key, attr)
    if not isinstance(values, list):
        return []
    return [v for v in values if isinstance(v, str)]


def _request_error(error: Mapping[str, Any]) -> str:
    loc = ".".join(str(part) for part in error["loc"])
    return f"{loc}: {error['msg']}" if loc else error["msg"]


def validate_image_request(
    params: ImageRequestParams | Mapping[str, str],
    info: ImageServiceInfo | Mapping[str, Any] | None = None,
) -> ValidationReport:
    """
    Validate all five segments of an image request.

    Capabilities come from the service description: the declared profile's
    required formats and qualities plus any ``extraFormats``,
    ``extraQualities`` and ``extraFeatures``. Without a description the
    request is checked against level 0.

    A mapping that does not fit ``ImageRequestParams`` is reported with one
    error per offending field; declared values of the wrong JSON type are
    ignored.

    Parameters:
        params: Raw request segments (``region``, ``size``, ``rotation``,
            ``quality``, ``format``)
        info: Full or partial ``info.json`` for the target image

    Returns:
        ValidationReport listing every failing segment

    Example:
        >>> report = validate_image_request(
        ...     {"region": "full", "size": "max", "rotation": "0",
        ...      "quality": "gray", "format": "jpg"}
        ... )
        >>> report.errors
        ['Quality "gray" not supported. Supported: default']
    """
    if isinstance(params, Mapping):
        try:
            params = ImageRequestParams.model_validate(params)
        except ValidationError as e:
            return ValidationReport(
                valid=False, errors=[_request_error(err) for err in e.errors()]
            )

    profile = _declared(info, "profile", "profile")
    if profile not in PROFILES:
        profile = "level0"
    level = COMPLIANCE_LEVELS[profile]

    extra_features = _declared_tokens(info, "extraFeatures", "extra_features")
    extra_qualities = _declared_tokens(info, "extraQualities", "extra_qualities")
    extra_formats = _declared_tokens(info, "extraFormats", "extra_formats")

    # Dimensions that are not positive numbers are treated as unknown.
    width = _declared(info, "width", "width")
    height = _declared(info, "height", "height")
    if not is_positive_number(width):
        width = None
    if not is_positive_number(height):
        height = None

    supports_upscale = "sizeUpscaling" in extra_features
    supports_arbitrary = "rotationArbitrary" in extra_features
    supports_mirror = (
        "mirroring" in extra_features or "mirroring" in level.features or profile == "level2"
    )

    region, size, rotation = request_segments(params)

    results: list[ParamResult[Any]] = [
        validate_region(region, width, height),
        validate_size(size, width, height, supports_upscale),
        validate_rotation(rotation, supports_arbitrary, supports_mirror),
    ]
    results.append(validate_quality(params.quality, [*level.qualities, *extra_qualities]))
    results.append(validate_format(params.format, [*level.formats, *extra_formats]))

    errors = [r.error for r in results if not r.valid and r.error]

    return ValidationReport(valid=not errors, errors=errors, warnings=[])
