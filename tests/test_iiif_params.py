"""Tests for IIIF Image API request parameter validation."""

from pathlib import Path

from tessella.iiif.v3 import (
    ConfinedSize,
    HeightSize,
    ImageRequestParams,
    MaxSize,
    PercentRegion,
    PercentSize,
    PixelRegion,
    RotationParams,
    WidthHeightSize,
    WidthSize,
    load_json,
    validate_format,
    validate_image_request,
    validate_quality,
    validate_region,
    validate_rotation,
    validate_size,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestValidateRegion:
    """Tests for validate_region()."""

    def test_full_region(self):
        """Test that "full" parses to a full region."""
        result = validate_region("full")
        assert result.valid is True
        assert result.parsed.type == "full"

    def test_square_region(self):
        """Test that "square" parses to a square region."""
        result = validate_region("square")
        assert result.valid is True
        assert result.parsed.type == "square"

    def test_pixel_region(self):
        """Test that x,y,w,h parses to a pixel region."""
        result = validate_region("100,200,300,400")
        assert result.valid is True
        assert result.parsed == PixelRegion(x=100, y=200, w=300, h=400)

    def test_percent_region(self):
        """Test that pct:x,y,w,h parses to a percent region."""
        result = validate_region("pct:10,20,50,60")
        assert result.valid is True
        assert result.parsed == PercentRegion(x=10, y=20, w=50, h=60)

    def test_percent_region_with_decimals(self):
        """Test that percent regions accept decimal values."""
        result = validate_region("pct:12.5,0,33.3,100")
        assert result.valid is True
        assert result.parsed.x == 12.5
        assert result.parsed.w == 33.3

    def test_zero_width_rejected(self):
        """Test that zero-width regions are a range error."""
        result = validate_region("100,100,0,100")
        assert result.valid is False
        assert "width and height must be greater than 0" in result.error

    def test_zero_percent_height_rejected(self):
        """Test that zero-height percent regions are a range error."""
        result = validate_region("pct:0,0,50,0")
        assert result.valid is False
        assert "greater than 0" in result.error

    def test_invalid_syntax_rejected(self):
        """Test that unrecognised region strings are rejected."""
        result = validate_region("invalid")
        assert result.valid is False
        assert result.parsed is None
        assert "Invalid region syntax" in result.error

    def test_negative_coordinates_rejected(self):
        """Test that negative pixel coordinates do not parse."""
        assert validate_region("-1,0,10,10").valid is False

    def test_region_outside_image_rejected(self):
        """Test that regions starting past the image edge are rejected.

        Either start coordinate at or past its edge is enough: "2000,0,10,10"
        on a 2000 pixel wide image is rejected even though y is in range.
        """
        result = validate_region("2000,0,10,10", 2000, 1500)
        assert result.valid is False
        assert "outside image bounds" in result.error

        result = validate_region("0,1500,10,10", 2000, 1500)
        assert result.valid is False

    def test_region_at_last_pixel_accepted(self):
        assert validate_region("1999,1499,10,10", 2000, 1500).valid is True

    def test_region_inside_image_accepted(self):
        """Test that bounds are only enforced when dimensions are given."""
        assert validate_region("0,0,10,10", 2000, 1500).valid is True
        assert validate_region("5000,5000,10,10").valid is True


class TestValidateSize:
    """Tests for validate_size()."""

    def test_max_size(self):
        result = validate_size("max")
        assert result.valid is True
        assert result.parsed == MaxSize()

    def test_width_only(self):
        result = validate_size("500,")
        assert result.valid is True
        assert result.parsed == WidthSize(width=500, upscale=False)

    def test_height_only(self):
        result = validate_size(",600")
        assert result.valid is True
        assert result.parsed == HeightSize(height=600, upscale=False)

    def test_percent(self):
        result = validate_size("pct:50")
        assert result.valid is True
        assert result.parsed == PercentSize(percent=50, upscale=False)

    def test_width_height(self):
        result = validate_size("400,300")
        assert result.valid is True
        assert result.parsed == WidthHeightSize(width=400, height=300, upscale=False)

    def test_confined(self):
        """Test that !w,h parses to a confined size."""
        result = validate_size("!400,300")
        assert result.valid is True
        assert result.parsed == ConfinedSize(width=400, height=300, upscale=False)
        assert result.parsed.confined is True

    def test_upscale_prefix_when_supported(self):
        """Test that ^ sets upscale when the service supports it."""
        result = validate_size("^800,", None, None, True)
        assert result.valid is True
        assert result.parsed.upscale is True

    def test_upscale_prefix_when_not_supported(self):
        """Test that ^ is a capability error without upscale support."""
        result = validate_size("^max", None, None, False)
        assert result.valid is False
        assert "Upscaling" in result.error

    def test_upscale_confined(self):
        result = validate_size("^!400,300", supports_upscale=True)
        assert result.parsed == ConfinedSize(width=400, height=300, upscale=True)

    def test_zero_width_rejected(self):
        result = validate_size("0,")
        assert result.valid is False
        assert "greater than 0" in result.error

    def test_percent_over_100_needs_upscale(self):
        """Test that pct above 100 requires the ^ prefix."""
        assert validate_size("pct:150").valid is False
        assert validate_size("^pct:150", supports_upscale=True).valid is True

    def test_width_exceeding_region_needs_upscale(self):
        """Test that sizes larger than the region require the ^ prefix."""
        result = validate_size("600,", 500, 400)
        assert result.valid is False
        assert "exceeds region width" in result.error
        assert validate_size("^600,", 500, 400, True).valid is True

    def test_width_height_exceeding_region_rejected(self):
        result = validate_size("400,500", 500, 400)
        assert result.valid is False

    def test_invalid_syntax_rejected(self):
        result = validate_size("big")
        assert result.valid is False
        assert "Invalid size syntax" in result.error


class TestValidateRotation:
    """Tests for validate_rotation()."""

    def test_zero(self):
        result = validate_rotation("0")
        assert result.valid is True
        assert result.parsed == RotationParams(degrees=0, mirror=False)

    def test_ninety(self):
        result = validate_rotation("90")
        assert result.parsed == RotationParams(degrees=90, mirror=False)

    def test_full_turn(self):
        assert validate_rotation("360").valid is True

    def test_mirrored(self):
        result = validate_rotation("!90", False, True)
        assert result.valid is True
        assert result.parsed == RotationParams(degrees=90, mirror=True)

    def test_arbitrary_when_supported(self):
        result = validate_rotation("22.5", True)
        assert result.valid is True
        assert result.parsed.degrees == 22.5

    def test_arbitrary_when_not_supported(self):
        result = validate_rotation("45", False)
        assert result.valid is False
        assert "90-degree" in result.error

    def test_mirroring_when_not_supported(self):
        result = validate_rotation("!0", False, False)
        assert result.valid is False
        assert "Mirroring" in result.error

    def test_out_of_range(self):
        result = validate_rotation("400")
        assert result.valid is False
        assert "between 0 and 360" in result.error

    def test_negative_is_syntax_error(self):
        result = validate_rotation("-90")
        assert result.valid is False
        assert "Invalid rotation syntax" in result.error


class TestValidateQualityAndFormat:
    """Tests for validate_quality() and validate_format()."""

    def test_supported_quality(self):
        assert validate_quality("default", ["default"]).valid is True

    def test_unsupported_quality(self):
        result = validate_quality("color", ["default"])
        assert result.valid is False
        assert "not supported" in result.error

    def test_unknown_quality(self):
        result = validate_quality("invalid", ["default", "invalid"])
        assert result.valid is False
        assert "Invalid quality" in result.error

    def test_supported_format(self):
        assert validate_format("jpg", ["jpg"]).valid is True

    def test_unsupported_format(self):
        result = validate_format("webp", ["jpg"])
        assert result.valid is False
        assert "not supported" in result.error

    def test_unknown_format(self):
        result = validate_format("bmp", ["jpg", "bmp"])
        assert result.valid is False
        assert "Invalid format" in result.error


class TestValidateImageRequest:
    """Tests for validate_image_request()."""

    def test_default_request_is_valid(self):
        report = validate_image_request(ImageRequestParams())
        assert report.valid is True
        assert report.errors == []

    def test_level0_rejects_other_qualities(self):
        report = validate_image_request(
            {"region": "full", "size": "max", "rotation": "0", "quality": "gray", "format": "jpg"}
        )
        assert report.valid is False
        assert report.errors == ['Quality "gray" not supported. Supported: default']

    def test_collects_every_error(self):
        """Test that each failing segment contributes one error."""
        report = validate_image_request(
            {"region": "bogus", "size": "^max", "rotation": "0", "quality": "default", "format": "bmp"}
        )
        assert report.valid is False
        assert len(report.errors) == 3

    def test_capabilities_from_info(self):
        """Test that extraFeatures and extraFormats widen what is accepted."""
        info = load_json(str(FIXTURES_DIR / "info_level2.json"))
        report = validate_image_request(
            {"region": "pct:10,10,50,50", "size": "^max", "rotation": "!22.5",
             "quality": "bitonal", "format": "webp"},
            info,
        )
        assert report.valid is True

    def test_level2_without_arbitrary_rotation(self):
        info = {"profile": "level2", "width": 1000, "height": 800}
        report = validate_image_request({"rotation": "!45"}, info)
        assert report.errors == ["Only 90-degree rotations are supported"]

    def test_parsed_parameters_are_checked(self):
        """Test that pre-parsed values are held to the same capabilities."""
        params = ImageRequestParams(
            region=PixelRegion(x=0, y=0, w=100, h=100),
            size=MaxSize(upscale=True),
            rotation=RotationParams(degrees=90),
        )
        report = validate_image_request(params)
        assert report.errors == ["Upscaling (^ prefix) is not supported"]

    def test_invalid_structured_region_is_reported(self):
        """Test that a mapping that does not fit the request model is reported."""
        report = validate_image_request(
            {"region": {"type": "pixels", "x": 0, "y": 0, "w": 0, "h": 10}}
        )
        assert report.valid is False
        assert report.errors
        assert all(error.startswith("region") for error in report.errors)

    def test_non_numeric_dimensions_are_unknown(self):
        """Test that string dimensions in a partial info.json skip the bounds check."""
        info = {"profile": "level1", "width": "1000", "height": "800"}
        assert validate_image_request({"region": "10,10,5,5"}, info).valid is True
        assert validate_image_request({"region": "5000,0,5,5"}, info).valid is True

    def test_malformed_extras_are_ignored(self):
        info = {
            "profile": "level0",
            "extraFeatures": "rotationArbitrary",
            "extraFormats": [{"format": "webp"}, "png"],
        }
        report = validate_image_request({"rotation": "22.5", "format": "png"}, info)
        assert report.errors == ["Only 90-degree rotations are supported"]
