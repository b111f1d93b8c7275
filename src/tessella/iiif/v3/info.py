"""
Validation and generation of ``info.json`` documents.

``validate_info_json`` works on raw mappings so that documents which would
not even load into ``ImageServiceInfo`` still get a full list of problems.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .constants import FEATURES, IMAGE_API_CONTEXT, IMAGE_API_PROTOCOL, PROFILES
from .models import ImageServiceInfo, SizeInfo, TileInfo
from .results import ValidationReport
from .tiles import DEFAULT_SCALE_FACTORS, DEFAULT_TILE_SIZE
from .uris import round_half_up

DEFAULT_SIZE_WIDTHS: tuple[int, ...] = (150, 600, 1200)


def is_positive_number(value: Any) -> bool:
    """True for an int or float above zero; booleans are rejected."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def validate_info_json(doc: Mapping[str, Any] | ImageServiceInfo) -> ValidationReport:
    """
    Validate an ``info.json`` document.

    Checks the required properties (``@context``, ``id``, ``type``,
    ``protocol``, ``profile``, ``width``, ``height``), the optional size
    limits, ``sizes`` and ``tiles`` entries and ``extraFeatures``. Every
    problem is collected; nothing is raised.

    Parameters:
        doc: Parsed JSON document or ImageServiceInfo model

    Returns:
        ValidationReport with errors and warnings

    Example:
        >>> report = validate_info_json({"@context": IMAGE_API_CONTEXT, "type": "ImageService3"})
        >>> report.valid
        False
        >>> report.errors[0]
        'id is required'
    """
    if isinstance(doc, ImageServiceInfo):
        doc = doc.to_json()
    if not isinstance(doc, Mapping):
        return ValidationReport(valid=False, errors=["info.json must be a JSON object"])

    errors: list[str] = []
    warnings: list[str] = []

    context = doc.get("@context")
    if not context:
        errors.append("@context is required")
    elif isinstance(context, str):
        if context != IMAGE_API_CONTEXT:
            warnings.append(f'@context should be "{IMAGE_API_CONTEXT}"')
    elif isinstance(context, list):
        if IMAGE_API_CONTEXT not in context:
            errors.append(f'@context array must include "{IMAGE_API_CONTEXT}"')
        elif context[-1] != IMAGE_API_CONTEXT:
            warnings.append("@context array should end with Image API context")
    else:
        errors.append("@context must be a string or an array")

    service_id = doc.get("id")
    if not service_id:
        errors.append("id is required")
    elif not isinstance(service_id, str) or not service_id.startswith("http"):
        errors.append("id must be a valid HTTP(S) URI")
    elif service_id.endswith("/"):
        warnings.append("id should not have a trailing slash")

    service_type = doc.get("type")
    if not service_type:
        errors.append("type is required")
    elif service_type != "ImageService3":
        errors.append('type must be "ImageService3"')

    protocol = doc.get("protocol")
    if not protocol:
        errors.append("protocol is required")
    elif protocol != IMAGE_API_PROTOCOL:
        errors.append(f'protocol must be "{IMAGE_API_PROTOCOL}"')

    profile = doc.get("profile")
    if not profile:
        errors.append("profile is required")
    elif profile not in PROFILES:
        errors.append('profile must be "level0", "level1", or "level2"')

    for key in ("width", "height"):
        if key not in doc:
            errors.append(f"{key} is required")
        elif not is_positive_number(doc[key]):
            errors.append(f"{key} must be a positive integer")

    for key in ("maxWidth", "maxHeight", "maxArea"):
        if key in doc and not is_positive_number(doc[key]):
            errors.append(f"{key} must be a positive integer")

    sizes = doc.get("sizes")
    tiles = doc.get("tiles")

    if profile == "level0" and not sizes and not tiles:
        warnings.append("Level 0 servers should provide sizes or tiles array")

    if sizes is not None:
        if not isinstance(sizes, list):
            errors.append("sizes must be an array")
        else:
            for i, size in enumerate(sizes):
                size = size if isinstance(size, Mapping) else {}
                if not is_positive_number(size.get("width")):
                    errors.append(f"sizes[{i}].width must be a positive integer")
                if not is_positive_number(size.get("height")):
                    errors.append(f"sizes[{i}].height must be a positive integer")

    if tiles is not None:
        if not isinstance(tiles, list):
            errors.append("tiles must be an array")
        else:
            for i, tile in enumerate(tiles):
                tile = tile if isinstance(tile, Mapping) else {}
                if not is_positive_number(tile.get("width")):
                    errors.append(f"tiles[{i}].width must be a positive integer")
                if "height" in tile and not is_positive_number(tile["height"]):
                    errors.append(f"tiles[{i}].height must be a positive integer")
                scale_factors = tile.get("scaleFactors")
                if not isinstance(scale_factors, list) or not scale_factors:
                    errors.append(f"tiles[{i}].scaleFactors must be a non-empty array of integers")

    extra_features = doc.get("extraFeatures")
    if extra_features is not None:
        if not isinstance(extra_features, list):
            errors.append("extraFeatures must be an array")
        else:
            for feature in extra_features:
                if not isinstance(feature, str) or feature not in FEATURES:
                    warnings.append(f"Unknown feature: {feature}")
            if "sizeUpscaling" in extra_features:
                if "maxWidth" not in doc and "maxArea" not in doc:
                    errors.append(
                        "sizeUpscaling feature requires maxWidth or maxArea to be specified"
                    )

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)


def generate_info_json(
    service_id: str,
    width: int,
    height: int,
    profile: str = "level0",
    **extras: Any,
) -> ImageServiceInfo:
    """
    Build a minimal ``info.json`` document.

    Optional properties (``sizes``, ``tiles``, ``maxWidth``, ``rights``,
    ``extraFeatures``, ...) are passed through verbatim under either their
    JSON or their attribute names.

    Raises:
        pydantic.ValidationError: If the resulting document is malformed

    Example:
        >>> info = generate_info_json("https://example.org/iiif/img", 1000, 800, "level2", maxWidth=2000)
        >>> info.max_width
        2000
    """
    return ImageServiceInfo.model_validate(
        {
            "@context": IMAGE_API_CONTEXT,
            "id": service_id,
            "type": "ImageService3",
            "protocol": IMAGE_API_PROTOCOL,
            "profile": profile,
            "width": width,
            "height": height,
            **{k: v for k, v in extras.items() if v is not None},
        }
    )


def generate_standard_sizes(
    width: int,
    height: int,
    candidate_widths: Iterable[int] = DEFAULT_SIZE_WIDTHS,
) -> list[SizeInfo]:
    """
    Derive ``sizes`` entries for the given candidate widths.

    Candidates wider than the full image are dropped; heights keep the aspect
    ratio, rounded half up.

    Example:
        >>> [(s.width, s.height) for s in generate_standard_sizes(1000, 800, [400, 800, 1200])]
        [(400, 320), (800, 640)]
    """
    return [
        SizeInfo(width=w, height=round_half_up(w * height / width))
        for w in candidate_widths
        if w <= width
    ]


def generate_standard_tiles(
    tile_width: int = DEFAULT_TILE_SIZE,
    scale_factors: Iterable[int] = DEFAULT_SCALE_FACTORS,
) -> list[TileInfo]:
    """Single square tile configuration for ``info.json`` ``tiles``."""
    return [TileInfo(width=tile_width, scale_factors=list(scale_factors))]
