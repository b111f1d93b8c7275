"""Tests for tile geometry."""

from pathlib import Path

import pytest

from tessella.iiif.v3 import (
    TileCount,
    TileRequest,
    build_tile_uri,
    calculate_max_level,
    calculate_scale_factors,
    calculate_tile_count,
    calculate_tile_request,
    get_all_tile_uris,
    get_info_tile_uris,
    iter_tile_requests,
    load_info,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"
BASE = "https://example.com/iiif/image1"


class TestCalculateTileRequest:
    """Tests for calculate_tile_request()."""

    def test_first_tile(self):
        tile = calculate_tile_request(2000, 1500, 512, 512, 1, 0, 0)
        assert tile == TileRequest(x=0, y=0, width=512, height=512, scale_factor=1)

    def test_edge_tile_is_clipped(self):
        """Test that the bottom-right tile stops at the image edge."""
        tile = calculate_tile_request(2000, 1500, 512, 512, 1, 3, 2)
        assert tile.x == 3 * 512
        assert tile.y == 2 * 512
        assert tile.width == 464
        assert tile.height == 476

    def test_scaled_tile(self):
        """Test that a tile at scale 2 covers twice the pixels."""
        tile = calculate_tile_request(2000, 1500, 512, 512, 2, 1, 1)
        assert tile == TileRequest(x=1024, y=1024, width=976, height=476, scale_factor=2)

    def test_rejects_non_positive_scale_factor(self):
        with pytest.raises(ValueError, match="scale_factor"):
            calculate_tile_request(2000, 1500, 512, 512, 0, 0, 0)


class TestCalculateTileCount:
    """Tests for calculate_tile_count()."""

    def test_full_resolution(self):
        assert calculate_tile_count(2000, 1500, 512, 512, 1) == TileCount(columns=4, rows=3)

    def test_scale_factor_two(self):
        assert calculate_tile_count(2000, 1500, 512, 512, 2) == TileCount(columns=2, rows=2)

    def test_single_tile(self):
        assert calculate_tile_count(2000, 1500, 512, 512, 4) == TileCount(columns=1, rows=1)

    def test_rectangular_tiles(self):
        assert calculate_tile_count(1024, 768, 512, 256, 1) == TileCount(columns=2, rows=3)


class TestTileCoverage:
    """Tiles in a grid cover the image exactly."""

    @pytest.mark.parametrize(
        "image_width,image_height,tile_width,tile_height,scale_factor",
        [
            (2000, 1500, 512, 512, 1),
            (2000, 1500, 512, 512, 2),
            (2000, 1500, 256, 512, 8),
            (1, 1, 512, 512, 1),
            (1025, 513, 512, 256, 1),
            (7, 3, 2, 2, 3),
        ],
    )
    def test_rows_and_columns_cover_image(
        self, image_width, image_height, tile_width, tile_height, scale_factor
    ):
        count = calculate_tile_count(image_width, image_height, tile_width, tile_height, scale_factor)
        tiles = list(
            iter_tile_requests(image_width, image_height, tile_width, tile_height, scale_factor)
        )

        assert len(tiles) == count.columns * count.rows

        first_row = [t for t in tiles if t.y == 0]
        first_column = [t for t in tiles if t.x == 0]
        assert sum(t.width for t in first_row) == image_width
        assert sum(t.height for t in first_column) == image_height
        assert all(t.width > 0 and t.height > 0 for t in tiles)
        assert all(t.x + t.width <= image_width for t in tiles)
        assert all(t.y + t.height <= image_height for t in tiles)


class TestBuildTileUri:
    """Tests for build_tile_uri()."""

    def test_full_resolution_tile(self):
        tile = TileRequest(x=0, y=0, width=512, height=512, scale_factor=1)
        uri = build_tile_uri(BASE, tile)
        assert uri == f"{BASE}/0,0,512,512/512,512/0/default.jpg"

    def test_custom_format_and_quality(self):
        tile = TileRequest(x=512, y=512, width=512, height=512, scale_factor=2)
        uri = build_tile_uri(BASE, tile, "png", "color")
        assert uri == f"{BASE}/512,512,512,512/256,256/0/color.png"

    def test_edge_tile_size_rounds_up(self):
        tile = TileRequest(x=1024, y=1024, width=975, height=475, scale_factor=2)
        uri = build_tile_uri(BASE, tile)
        assert uri == f"{BASE}/1024,1024,975,475/488,238/0/default.jpg"


class TestGetAllTileUris:
    """Tests for get_all_tile_uris()."""

    def test_grid_size(self):
        uris = get_all_tile_uris(BASE, 1024, 1024, 512, 512, 1)
        assert len(uris) == 4

    def test_row_major_order(self):
        uris = get_all_tile_uris(BASE, 1024, 1024, 512, 512, 1)
        assert uris[0] == f"{BASE}/0,0,512,512/512,512/0/default.jpg"
        assert uris[1] == f"{BASE}/512,0,512,512/512,512/0/default.jpg"
        assert uris[2] == f"{BASE}/0,512,512,512/512,512/0/default.jpg"
        assert uris[3] == f"{BASE}/512,512,512,512/512,512/0/default.jpg"


class TestScaleFactors:
    """Tests for calculate_max_level() and calculate_scale_factors()."""

    def test_max_level(self):
        assert calculate_max_level(8000, 6000) == 12
        assert calculate_max_level(0, 100) == 0

    def test_scale_factors_stop_at_single_tile(self):
        assert calculate_scale_factors(2000, 1500, 512) == [1, 2, 4]
        assert calculate_scale_factors(4096, 2048, 256) == [1, 2, 4, 8, 16]

    def test_small_image(self):
        assert calculate_scale_factors(512, 300, 512) == [1]


class TestInfoTileUris:
    """Tests for get_info_tile_uris()."""

    def test_every_scale_factor(self):
        """Test that all advertised scale factors are enumerated."""
        info = load_info(FIXTURES_DIR / "info_level0.json")
        uris = get_info_tile_uris(info)
        # 4x3 + 2x2 + 1x1
        assert len(uris) == 17

    def test_single_scale_factor(self):
        info = load_info(FIXTURES_DIR / "info_level0.json")
        uris = get_info_tile_uris(info, scale_factor=4)
        assert uris == ["https://iiif.example.org/image1/0,0,2000,1500/500,375/0/default.jpg"]

    def test_rectangular_tiles(self):
        """Test that tile height is honoured when given."""
        info = load_info(FIXTURES_DIR / "info_level2.json")
        uris = get_info_tile_uris(info, "webp")
        # 2x3 at scale 1, 1x2 at scale 2
        assert len(uris) == 8
        assert uris[0] == "https://iiif.example.org/image2/0,0,512,256/512,256/0/default.webp"
