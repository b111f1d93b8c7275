"""
Image service references and the per-image service facade.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .constants import IMAGE_SERVICE_TYPE, PROFILES, ImageApiProfile
from .info import generate_info_json
from .models import ImageRequestParams, ImageServiceInfo, ImageServiceReference
from .params import validate_image_request
from .results import ValidationReport
from .tiles import DEFAULT_TILE_SIZE, get_all_tile_uris
from .uris import build_image_uri, build_info_uri, encode_identifier


def create_image_service_reference(
    service_id: str,
    profile: str = "level2",
    width: int | None = None,
    height: int | None = None,
) -> ImageServiceReference:
    """
    Build an ImageService3 pointer for a canvas or annotation body.

    Example:
        >>> ref = create_image_service_reference("https://example.org/iiif/img", "level0")
        >>> ref.to_json()
        {'id': 'https://example.org/iiif/img', 'type': 'ImageService3', 'protocol': 'http://iiif.io/api/image', 'profile': 'level0'}
    """
    return ImageServiceReference(id=service_id, profile=profile, width=width, height=height)


def is_image_service3(value: Any) -> bool:
    """
    Whether ``value`` looks like an Image API 3 service.

    Accepts mappings (parsed JSON) and models with ``type`` and ``profile``
    attributes.
    """
    if value is None:
        return False
    if isinstance(value, Mapping):
        service_type = value.get("type")
        profile = value.get("profile")
    else:
        service_type = getattr(value, "type", None)
        profile = getattr(value, "profile", None)
    return service_type == IMAGE_SERVICE_TYPE and profile in PROFILES


class IIIFImageService(BaseModel):
    """
    One image served through the Image API.

    Binds the server base URI, identifier, dimensions and compliance level
    so requests and the ``info.json`` for the image can be produced without
    repeating them.

    Example:
        >>> service = IIIFImageService(
        ...     base_uri="https://example.com/iiif", identifier="image1", width=1000, height=800
        ... )
        >>> service.build_image_uri(ImageRequestParams(size="!200,200"))
        'https://example.com/iiif/image1/full/!200,200/0/default.jpg'
    """

    model_config = ConfigDict(frozen=True)

    base_uri: str
    identifier: str
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    profile: ImageApiProfile = "level2"

    @property
    def service_id(self) -> str:
        """Base URI of this image's service, with the identifier encoded."""
        return f"{self.base_uri.rstrip('/')}/{encode_identifier(self.identifier)}"

    def info_uri(self) -> str:
        return build_info_uri(self.service_id)

    def get_info_json(self, **extras: Any) -> ImageServiceInfo:
        """Generate this image's ``info.json``; see ``generate_info_json`` for extras."""
        return generate_info_json(self.service_id, self.width, self.height, self.profile, **extras)

    def build_image_uri(self, params: ImageRequestParams | Mapping[str, Any]) -> str:
        return build_image_uri(self.service_id, params)

    def validate_request(
        self,
        params: ImageRequestParams | Mapping[str, Any],
        info: ImageServiceInfo | None = None,
    ) -> ValidationReport:
        """Validate a request against ``info`` or, by default, this image's generated ``info.json``."""
        return validate_image_request(params, info if info is not None else self.get_info_json())

    def tile_uris(
        self,
        scale_factor: int = 1,
        tile_width: int = DEFAULT_TILE_SIZE,
        tile_height: int | None = None,
        fmt: str = "jpg",
        quality: str = "default",
    ) -> list[str]:
        """All tile URIs for this image at one scale factor."""
        return get_all_tile_uris(
            self.service_id,
            self.width,
            self.height,
            tile_width,
            tile_height or tile_width,
            scale_factor,
            fmt,
            quality,
        )
