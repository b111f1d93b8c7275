"""
IIIF Image API 3.0 models and utilities.

This module provides Pydantic models for Image API requests and ``info.json``
documents along with validation, URI building, tile geometry and compliance
helpers.

Basic usage:
    >>> from tessella.iiif.v3 import IIIFImageService, validate_image_request
    >>>
    >>> service = IIIFImageService(
    ...     base_uri="https://example.org/iiif", identifier="page 1", width=4000, height=3000
    ... )
    >>> service.build_image_uri({"size": "!1000,1000"})
    'https://example.org/iiif/page%201/full/!1000,1000/0/default.jpg'

Tiles for a deep-zoom viewer:
    >>> from tessella.iiif.v3 import get_all_tile_uris
    >>>
    >>> for uri in get_all_tile_uris(service.service_id, 4000, 3000, 512, 512, 4):
    ...     print(uri)
"""

from .constants import (
    COMPLIANCE_LEVELS,
    FEATURE_DESCRIPTIONS,
    FORMAT_MIME_TYPES,
    IMAGE_API_CONTEXT,
    IMAGE_API_PROTOCOL,
    MIME_TO_FORMAT,
)
from .models import (
    ConfinedSize,
    FullRegion,
    HeightSize,
    ImageRequestParams,
    ImageServiceInfo,
    ImageServiceReference,
    MaxSize,
    PercentRegion,
    PercentSize,
    PixelRegion,
    RegionParams,
    RotationParams,
    SizeInfo,
    SizeParams,
    SquareRegion,
    TileCount,
    TileInfo,
    TileRequest,
    WidthHeightSize,
    WidthSize,
)
from .results import (
    ComplianceResult,
    ParamResult,
    ParsedImageUri,
    ValidationReport,
)
from .params import (
    validate_region,
    validate_size,
    validate_rotation,
    validate_quality,
    validate_format,
    validate_image_request,
)
from .uris import (
    build_image_uri,
    build_info_uri,
    format_region,
    format_size,
    format_rotation,
    parse_image_uri,
    encode_identifier,
    decode_identifier,
    get_image_mime_type,
    get_format_from_mime,
    calculate_resulting_size,
)
from .tiles import (
    calculate_tile_request,
    calculate_tile_count,
    build_tile_uri,
    iter_tile_requests,
    get_all_tile_uris,
    calculate_max_level,
    calculate_scale_factors,
    get_info_tile_uris,
)
from .info import (
    validate_info_json,
    generate_info_json,
    generate_standard_sizes,
    generate_standard_tiles,
)
from .compliance import (
    check_compliance_level,
    get_features_for_profile,
    get_formats_for_profile,
    get_qualities_for_profile,
)
from .services import (
    create_image_service_reference,
    is_image_service3,
    IIIFImageService,
)
from .loaders import (
    load_json,
    load_info,
    parse_info,
)

__all__ = [
    # Constants
    "COMPLIANCE_LEVELS",
    "FEATURE_DESCRIPTIONS",
    "FORMAT_MIME_TYPES",
    "IMAGE_API_CONTEXT",
    "IMAGE_API_PROTOCOL",
    "MIME_TO_FORMAT",
    # Models
    "ConfinedSize",
    "FullRegion",
    "HeightSize",
    "ImageRequestParams",
    "ImageServiceInfo",
    "ImageServiceReference",
    "MaxSize",
    "PercentRegion",
    "PercentSize",
    "PixelRegion",
    "RegionParams",
    "RotationParams",
    "SizeInfo",
    "SizeParams",
    "SquareRegion",
    "TileCount",
    "TileInfo",
    "TileRequest",
    "WidthHeightSize",
    "WidthSize",
    # Results
    "ComplianceResult",
    "ParamResult",
    "ParsedImageUri",
    "ValidationReport",
    # Parameter validation
    "validate_region",
    "validate_size",
    "validate_rotation",
    "validate_quality",
    "validate_format",
    "validate_image_request",
    # URIs
    "build_image_uri",
    "build_info_uri",
    "format_region",
    "format_size",
    "format_rotation",
    "parse_image_uri",
    "encode_identifier",
    "decode_identifier",
    "get_image_mime_type",
    "get_format_from_mime",
    "calculate_resulting_size",
    # Tiles
    "calculate_tile_request",
    "calculate_tile_count",
    "build_tile_uri",
    "iter_tile_requests",
    "get_all_tile_uris",
    "calculate_max_level",
    "calculate_scale_factors",
    "get_info_tile_uris",
    # info.json
    "validate_info_json",
    "generate_info_json",
    "generate_standard_sizes",
    "generate_standard_tiles",
    # Compliance
    "check_compliance_level",
    "get_features_for_profile",
    "get_formats_for_profile",
    "get_qualities_for_profile",
    # Services
    "create_image_service_reference",
    "is_image_service3",
    "IIIFImageService",
    # Loaders
    "load_json",
    "load_info",
    "parse_info",
]
