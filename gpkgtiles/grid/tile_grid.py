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

"""
Conversion between coordinates and tile addresses of a tile matrix.

All functions are pure. They work on entities already loaded from the
GeoPackage and never touch the file.
"""

import logging
import math

from gpkgtiles.exception import PreconditionError
from gpkgtiles.grid import (
    GPKG_TILE_ORIGIN,
    OutOfBoundsError,
    origin_corner,
    origin_directions,
    origin_from_string,
)
from gpkgtiles.srs import CrsCoordinate
from gpkgtiles.util.bbox import bbox_contains_point, round_bbox

log = logging.getLogger(__name__)


def _check_entities(tile_set, matrix_set, matrix):
    if matrix_set.table_name != tile_set.table_name:
        raise PreconditionError('tile matrix set %s does not belong to tile set %s' % (
            matrix_set.table_name, tile_set.table_name))
    if matrix.table_name != tile_set.table_name:
        raise PreconditionError('tile matrix %s/%d does not belong to tile set %s' % (
            matrix.table_name, matrix.zoom_level, tile_set.table_name))


def check_srs(tile_set, srs, coordinate):
    """
    Check that `coordinate` is in the reference system of `tile_set`.
    `srs` is the catalog entry of the tile set. Coordinates are never
    reprojected.
    """
    if srs.identifier != tile_set.srs_id:
        raise PreconditionError('spatial reference system %s (srs_id %d) is not the one of tile set %s (srs_id %d)' % (
            srs.srs_code, srs.identifier, tile_set.table_name, tile_set.srs_id))
    if not srs.matches(coordinate.authority, coordinate.identifier):
        raise PreconditionError(
            'coordinate reference system %s does not match %s of tile set %s' % (
                coordinate.srs_code, srs.srs_code, tile_set.table_name))


def to_tile_address(tile_set, matrix_set, matrix, coordinate, precision, srs, origin=GPKG_TILE_ORIGIN):
    """
    Returns the ``(column, row)`` of the tile in `matrix` that contains
    `coordinate`.

    The tile matrix set bounds are first rounded outwards to `precision`
    decimal digits. Coordinates outside of these rounded bounds raise
    :class:`~gpkgtiles.grid.OutOfBoundsError`. Coordinates on a border
    between two tiles belong to the tile further away from the origin.
    Coordinates on the far edges of the bounds belong to the last
    column/row.

    :param srs: the spatial reference system entry of `tile_set`
    """
    _check_entities(tile_set, matrix_set, matrix)
    check_srs(tile_set, srs, coordinate)
    origin = origin_from_string(origin)

    bbox = round_bbox(matrix_set.bounding_box, precision)
    if not bbox_contains_point(bbox, coordinate.x, coordinate.y):
        raise OutOfBoundsError('coordinate (%r, %r) is outside of the bounds %r of tile set %s' % (
            coordinate.x, coordinate.y, bbox, tile_set.table_name))

    corner_x, corner_y = origin_corner(bbox, origin)
    column = int(math.floor(abs(coordinate.x - corner_x) / matrix.tile_width_in_srs))
    row = int(math.floor(abs(coordinate.y - corner_y) / matrix.tile_height_in_srs))

    return min(column, matrix.matrix_width - 1), min(row, matrix.matrix_height - 1)


def to_coordinate(tile_set, matrix_set, matrix, column, row, srs, origin=GPKG_TILE_ORIGIN):
    """
    Returns the origin corner of the tile ``(column, row)`` as a
    :class:`~gpkgtiles.srs.CrsCoordinate`.

    Only negative addresses are rejected. Addresses beyond the matrix
    dimensions are extrapolated.
    """
    _check_entities(tile_set, matrix_set, matrix)
    if srs.identifier != tile_set.srs_id:
        raise PreconditionError('spatial reference system %s is not the one of tile set %s' % (
            srs.srs_code, tile_set.table_name))
    if column < 0:
        raise PreconditionError('column must be >= 0, got %r' % (column, ))
    if row < 0:
        raise PreconditionError('row must be >= 0, got %r' % (row, ))
    origin = origin_from_string(origin)

    corner_x, corner_y = origin_corner(matrix_set.bounding_box, origin)
    x_dir, y_dir = origin_directions(origin)
    x = corner_x + x_dir * column * matrix.tile_width_in_srs
    y = corner_y + y_dir * row * matrix.tile_height_in_srs
    return CrsCoordinate(x, y, srs.organization, srs.organization_srs_id)


def tile_bbox(matrix_set, matrix, column, row):
    """
    Returns the bbox of the tile ``(column, row)`` with the upper left
    tile origin of GeoPackages.
    """
    min_x = matrix_set.bounding_box.min_x + column * matrix.tile_width_in_srs
    max_y = matrix_set.bounding_box.max_y - row * matrix.tile_height_in_srs
    return (min_x, max_y - matrix.tile_height_in_srs, min_x + matrix.tile_width_in_srs, max_y)


def transform_tile_coord(column, row, from_origin, to_origin, matrix_width, matrix_height):
    """
    Convert a tile address between two tile origins of a
    ``matrix_width`` x ``matrix_height`` grid.

    >>> transform_tile_coord(0, 0, 'ul', 'll', 4, 2)
    (0, 1)
    >>> transform_tile_coord(1, 3, 'ul', 'lr', 2, 4)
    (0, 0)
    >>> transform_tile_coord(2, 0, 'ul', 'll', 2, 2)
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: tile (2, 0) is outside of the 2x2 matrix
    """
    if not (0 <= column < matrix_width and 0 <= row < matrix_height):
        raise PreconditionError('tile (%d, %d) is outside of the %dx%d matrix' % (
            column, row, matrix_width, matrix_height))
    from_origin = origin_from_string(from_origin)
    to_origin = origin_from_string(to_origin)
    from_x, from_y = origin_directions(from_origin)
    to_x, to_y = origin_directions(to_origin)
    if from_x != to_x:
        column = matrix_width - 1 - column
    if from_y != to_y:
        row = matrix_height - 1 - row
    return column, row
