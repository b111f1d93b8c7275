"""
Compliance level checks.

Level requirements are cumulative: everything level 0 mandates is mandated
by level 1, and everything level 1 mandates is mandated by level 2.
"""

from __future__ import annotations

from .constants import COMPLIANCE_LEVELS
from .models import ImageServiceInfo
from .results import ComplianceResult


def get_features_for_profile(profile: str) -> list[str]:
    """
    Features required at a compliance level.

    Raises:
        KeyError: If ``profile`` is not level0, level1 or level2
    """
    return list(COMPLIANCE_LEVELS[profile].features)


def get_formats_for_profile(profile: str) -> list[str]:
    return list(COMPLIANCE_LEVELS[profile].formats)


def get_qualities_for_profile(profile: str) -> list[str]:
    return list(COMPLIANCE_LEVELS[profile].qualities)


def check_compliance_level(info: ImageServiceInfo, target_level: str) -> ComplianceResult:
    """
    Compare a service's declared capabilities against a compliance level.

    The service supports what its own ``profile`` mandates plus its
    ``extraFeatures``, ``extraFormats`` and ``extraQualities``. A service is
    compliant when no required feature is missing; missing formats and
    qualities are reported alongside.

    Parameters:
        info: Service description
        target_level: Level to check against

    Returns:
        ComplianceResult listing what is missing, in level table order

    Example:
        >>> info = ImageServiceInfo(id="https://example.org/iiif/img", profile="level1", width=10, height=10)
        >>> check_compliance_level(info, "level2").missing_features
        ['regionByPct', 'sizeByConfinedWh', 'sizeByPct', 'rotationBy90s']
    """
    target = COMPLIANCE_LEVELS[target_level]
    declared = COMPLIANCE_LEVELS[info.profile]

    features = {*declared.features, *(info.extra_features or [])}
    formats = {*declared.formats, *(info.extra_formats or [])}
    qualities = {*declared.qualities, *(info.extra_qualities or [])}

    missing_features = [f for f in target.features if f not in features]
    return ComplianceResult(
        compliant=not missing_features,
        missing_features=missing_features,
        missing_formats=[f for f in target.formats if f not in formats],
        missing_qualities=[q for q in target.qualities if q not in qualities],
    )
