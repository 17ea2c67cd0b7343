# This file is part of the gpkgtiles project.
# Copyright (C) 2026 gpkgtiles contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import pytest

from gpkgtiles.exception import PreconditionError
from gpkgtiles.grid import (
    ORIGIN_LL,
    ORIGIN_LR,
    ORIGIN_UL,
    ORIGIN_UR,
    OutOfBoundsError,
    origin_from_string,
)
from gpkgtiles.grid.tile_grid import (
    tile_bbox,
    to_coordinate,
    to_tile_address,
    transform_tile_coord,
)
from gpkgtiles.pyramid import TileMatrix, TileMatrixSet, TileSet
from gpkgtiles.srs import CrsCoordinate, SpatialReferenceSystem

WGS84 = SpatialReferenceSystem('WGS 84', 4326, 'EPSG', 4326, 'GEOGCS[]')
WEBMERCATOR = SpatialReferenceSystem('WGS 84 / Pseudo-Mercator', 3857, 'EPSG', 3857, 'PROJCS[]')


def coord(x, y, srs_code='EPSG:4326'):
    return CrsCoordinate.from_srs_code(x, y, srs_code)


class TestToTileAddress(object):
    """
    2x2 tiles of 256x256 pixel covering (0, 0, 30, 50). Each tile is 15
    units wide and 25 units high.
    """

    def setup_method(self):
        bbox = (0, 0, 30, 50)
        self.tile_set = TileSet('tiles', 'tiles', '', None, bbox, 4326)
        self.matrix_set = TileMatrixSet('tiles', 4326, bbox)
        self.matrix = TileMatrix('tiles', 15, 2, 2, 256, 256, 30 / 512, 50 / 512)

    def address(self, x, y, precision=7, **kw):
        return to_tile_address(self.tile_set, self.matrix_set, self.matrix, coord(x, y),
                               precision, WGS84, **kw)

    @pytest.mark.parametrize('point,expected', [
        ((29.9, 30), (1, 0)),
        ((0, 40), (0, 0)),
        ((20, 0.01), (1, 1)),
        ((7.5, 37.5), (0, 0)),
        ((22.5, 12.5), (1, 1)),
    ])
    def test_addresses(self, point, expected):
        assert self.address(*point) == expected

    @pytest.mark.parametrize('point,expected', [
        ((0, 50), (0, 0)),
        ((30, 50), (1, 0)),
        ((0, 0), (0, 1)),
        ((30, 0), (1, 1)),
    ])
    def test_corners(self, point, expected):
        assert self.address(*point) == expected

    def test_internal_border_belongs_to_tile_away_from_origin(self):
        assert self.address(15, 50) == (1, 0)
        assert self.address(0, 25) == (0, 1)
        assert self.address(15, 25) == (1, 1)
        assert self.address(14.9999999, 25.0000001) == (0, 0)

    @pytest.mark.parametrize('point', [
        (-0.1, 10), (30.1, 10), (10, -0.1), (10, 50.1),
    ])
    def test_out_of_bounds(self, point):
        with pytest.raises(OutOfBoundsError):
            self.address(*point)

    def test_out_of_bounds_is_precondition_error(self):
        with pytest.raises(PreconditionError):
            self.address(31, 10)

    def test_bounds_rounded_to_precision(self):
        # max x 29.999 rounds up to 30.0 with 2 decimal digits
        matrix_set = TileMatrixSet('tiles', 4326, (0, 0, 29.999, 50))
        with pytest.raises(OutOfBoundsError):
            to_tile_address(self.tile_set, matrix_set, self.matrix, coord(30, 10), 7, WGS84)
        assert to_tile_address(self.tile_set, matrix_set, self.matrix, coord(30, 10), 2, WGS84) == (1, 1)
        with pytest.raises(OutOfBoundsError):
            to_tile_address(self.tile_set, matrix_set, self.matrix, coord(30.01, 10), 2, WGS84)

    def test_srs_mismatch(self):
        with pytest.raises(PreconditionError):
            to_tile_address(self.tile_set, self.matrix_set, self.matrix,
                            coord(10, 10, 'EPSG:3857'), 7, WGS84)

    def test_srs_authority_case(self):
        c = CrsCoordinate(10, 10, 'epsg', 4326)
        assert to_tile_address(self.tile_set, self.matrix_set, self.matrix, c, 7, WGS84) == (0, 1)

    def test_srs_not_of_tile_set(self):
        with pytest.raises(PreconditionError):
            to_tile_address(self.tile_set, self.matrix_set, self.matrix,
                            coord(10, 10, 'EPSG:3857'), 7, WEBMERCATOR)

    def test_matrix_of_other_tile_set(self):
        matrix = TileMatrix('other', 15, 2, 2, 256, 256, 30 / 512, 50 / 512)
        with pytest.raises(PreconditionError):
            to_tile_address(self.tile_set, self.matrix_set, matrix, coord(10, 10), 7, WGS84)

    @pytest.mark.parametrize('origin,point,expected', [
        (ORIGIN_LL, (1, 1), (0, 0)),
        (ORIGIN_LL, (29, 49), (1, 1)),
        (ORIGIN_UR, (29, 49), (0, 0)),
        (ORIGIN_LR, (29, 1), (0, 0)),
        ('sw', (20, 10), (1, 0)),
    ])
    def test_origins(self, origin, point, expected):
        assert self.address(*point, origin=origin) == expected


class TestToCoordinate(object):

    def setup_method(self):
        bbox = (0, 0, 30, 50)
        self.tile_set = TileSet('tiles', 'tiles', '', None, bbox, 4326)
        self.matrix_set = TileMatrixSet('tiles', 4326, bbox)
        self.matrix = TileMatrix('tiles', 15, 2, 2, 256, 256, 30 / 512, 50 / 512)

    def coordinate(self, column, row, **kw):
        return to_coordinate(self.tile_set, self.matrix_set, self.matrix, column, row, WGS84, **kw)

    def test_upper_left_corners(self):
        assert self.coordinate(0, 0) == coord(0, 50)
        assert self.coordinate(1, 0) == coord(15, 50)
        assert self.coordinate(1, 1) == coord(15, 25)

    def test_tagged_with_tile_set_srs(self):
        assert self.coordinate(0, 0).srs_code == 'EPSG:4326'

    def test_negative(self):
        with pytest.raises(PreconditionError):
            self.coordinate(-1, 0)
        with pytest.raises(PreconditionError):
            self.coordinate(0, -1)

    def test_beyond_matrix_is_extrapolated(self):
        assert self.coordinate(2, 2) == coord(30, 0)
        assert self.coordinate(4, 0) == coord(60, 50)

    def test_lower_left_origin(self):
        assert self.coordinate(1, 1, origin=ORIGIN_LL) == coord(15, 25)
        assert self.coordinate(0, 0, origin=ORIGIN_LL) == coord(0, 0)

    @pytest.mark.parametrize('point', [
        (0.5, 49.5), (14.9, 25.1), (15.1, 24.9), (29.5, 0.5), (22, 30),
    ])
    def test_round_trip_within_tile(self, point):
        column, row = to_tile_address(self.tile_set, self.matrix_set, self.matrix,
                                      coord(*point), 7, WGS84)
        corner = self.coordinate(column, row)
        assert corner.x <= point[0] < corner.x + self.matrix.tile_width_in_srs
        assert corner.y - self.matrix.tile_height_in_srs < point[1] <= corner.y


class TestTileBBox(object):

    def test_tile_bbox(self):
        matrix_set = TileMatrixSet('tiles', 3857, (-100, -100, 100, 100))
        matrix = TileMatrix('tiles', 1, 2, 2, 256, 256, 100 / 256, 100 / 256)
        assert tile_bbox(matrix_set, matrix, 0, 0) == (-100, 0, 0, 100)
        assert tile_bbox(matrix_set, matrix, 1, 1) == (0, -100, 100, 0)


class TestTransformTileCoord(object):

    @pytest.mark.parametrize('to_origin,expected', [
        (ORIGIN_UL, (1, 0)),
        (ORIGIN_UR, (2, 0)),
        (ORIGIN_LL, (1, 1)),
        (ORIGIN_LR, (2, 1)),
    ])
    def test_from_upper_left(self, to_origin, expected):
        assert transform_tile_coord(1, 0, ORIGIN_UL, to_origin, 4, 2) == expected

    def test_reversible(self):
        for origin in (ORIGIN_UR, ORIGIN_LL, ORIGIN_LR):
            column, row = transform_tile_coord(3, 1, ORIGIN_UL, origin, 5, 4)
            assert transform_tile_coord(column, row, origin, ORIGIN_UL, 5, 4) == (3, 1)

    def test_outside(self):
        with pytest.raises(PreconditionError):
            transform_tile_coord(0, 4, ORIGIN_UL, ORIGIN_LL, 4, 4)

    def test_unknown_origin(self):
        with pytest.raises(ValueError):
            origin_from_string('center')
