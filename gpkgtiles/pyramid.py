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
Entities of a tile pyramid: tile sets, their tile matrix set, the tile
matrices of each zoom level and the tiles themselves.

All constructors validate their arguments and raise
:class:`~gpkgtiles.exception.PreconditionError` for invalid values.
Equality is structural.
"""

import math
import numbers
import re
from collections import namedtuple

from gpkgtiles.exception import PreconditionError
from gpkgtiles.util.bbox import bbox_height, bbox_is_finite, bbox_width

RESERVED_TABLE_PREFIX = 'gpkg_'
TABLE_NAME_RE = re.compile(r'[_a-zA-Z]\w*', re.ASCII)


def check_table_name(table_name):
    """
    >>> check_table_name("test")
    'test'
    >>> check_table_name("_test_2")
    '_test_2'
    >>> check_table_name("2test")
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: The table_name 2test contains unsupported characters.
    >>> check_table_name("gpkg_tiles")
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: The table_name gpkg_tiles may not start with the reserved prefix gpkg_.

    @param table_name: A desired name for a tile pyramid table.
    @return: The name of the table if it is good, otherwise an exception.
    """
    if not table_name:
        raise PreconditionError('The table_name may not be empty.')
    if not TABLE_NAME_RE.fullmatch(table_name):
        raise PreconditionError('The table_name {0} contains unsupported characters.'.format(table_name))
    if table_name.lower().startswith(RESERVED_TABLE_PREFIX):
        raise PreconditionError('The table_name {0} may not start with the reserved prefix {1}.'.format(
            table_name, RESERVED_TABLE_PREFIX))
    return table_name


class BoundingBox(namedtuple('BoundingBox', 'min_x min_y max_x max_y')):
    """
    Axis aligned bounding box. Compatible with the plain
    ``(min_x, min_y, max_x, max_y)`` tuples of :mod:`gpkgtiles.util.bbox`.

    >>> BoundingBox(0, 0, 30, 50).width
    30.0
    >>> BoundingBox(10, 0, 0, 10)
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: invalid bounding box (10.0, 0.0, 0.0, 10.0): minimum exceeds maximum
    """
    __slots__ = ()

    def __new__(cls, min_x, min_y, max_x, max_y):
        values = tuple(float(v) for v in (min_x, min_y, max_x, max_y))
        if not bbox_is_finite(values):
            raise PreconditionError('invalid bounding box %r: values must be finite' % (values, ))
        if values[0] > values[2] or values[1] > values[3]:
            raise PreconditionError('invalid bounding box %r: minimum exceeds maximum' % (values, ))
        return super(BoundingBox, cls).__new__(cls, *values)

    @property
    def width(self):
        return bbox_width(self)

    @property
    def height(self):
        return bbox_height(self)


TileCoordinate = namedtuple('TileCoordinate', 'column row zoom_level')


class TileSet(object):
    """
    A tile pyramid, as stored in ``gpkg_contents`` with ``data_type``
    ``tiles``.
    """
    data_type = 'tiles'

    def __init__(self, table_name, identifier, description, last_change, bounding_box, srs_id):
        self.table_name = check_table_name(table_name)
        self.identifier = identifier
        self.description = description
        self.last_change = last_change
        if not isinstance(bounding_box, BoundingBox):
            if bounding_box is None:
                raise PreconditionError('tile set %s requires a bounding box' % table_name)
            bounding_box = BoundingBox(*bounding_box)
        self.bounding_box = bounding_box
        if srs_id is None:
            raise PreconditionError('tile set %s requires a spatial reference system' % table_name)
        self.srs_id = int(srs_id)

    def equals_fields(self, table_name, identifier, description, bounding_box, srs_id):
        """
        Compare everything except the modification timestamp.
        """
        return (self.table_name == table_name and
                self.identifier == identifier and
                self.description == description and
                self.bounding_box == tuple(bounding_box) and
                self.srs_id == srs_id)

    def __eq__(self, other):
        if not isinstance(other, TileSet):
            return NotImplemented
        return (self.equals_fields(other.table_name, other.identifier, other.description,
                                   other.bounding_box, other.srs_id) and
                self.last_change == other.last_change)

    def __hash__(self):
        return hash((self.table_name, self.identifier, self.bounding_box, self.srs_id))

    def __repr__(self):
        return 'TileSet(%r, %r, %r, srs_id=%d)' % (
            self.table_name, self.identifier, tuple(self.bounding_box), self.srs_id)


class TileMatrixSet(object):
    """
    The bounding box and spatial reference system shared by all tile
    matrices of one tile set. This box, not the one in ``gpkg_contents``,
    is the reference for all tile addressing.
    """
    def __init__(self, table_name, srs_id, bounding_box):
        self.table_name = check_table_name(table_name)
        self.srs_id = int(srs_id)
        if not isinstance(bounding_box, BoundingBox):
            bounding_box = BoundingBox(*bounding_box)
        self.bounding_box = bounding_box

    def __eq__(self, other):
        if not isinstance(other, TileMatrixSet):
            return NotImplemented
        return (self.table_name == other.table_name and
                self.srs_id == other.srs_id and
                self.bounding_box == other.bounding_box)

    def __hash__(self):
        return hash((self.table_name, self.srs_id, self.bounding_box))

    def __repr__(self):
        return 'TileMatrixSet(%r, %d, %r)' % (self.table_name, self.srs_id, tuple(self.bounding_box))


def _positive_int(name, value):
    if isinstance(value, bool) or int(value) != value or value <= 0:
        raise PreconditionError('%s must be an integer greater than 0, got %r' % (name, value))
    return int(value)


def _positive_float(name, value):
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise PreconditionError('%s must be greater than 0, got %r' % (name, value))
    return value


def check_zoom_level(zoom_level):
    if isinstance(zoom_level, bool) or int(zoom_level) != zoom_level or zoom_level < 0:
        raise PreconditionError('zoom_level must be an integer >= 0, got %r' % (zoom_level, ))
    return int(zoom_level)


def check_tile_address(column, row):
    """
    Returns `column` and `row` as ints. Both must be integers >= 0.

    >>> check_tile_address(2, 0)
    (2, 0)
    >>> check_tile_address(0.5, 0)
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: tile column and row must be integers >= 0, got (0.5, 0)
    """
    for value in (column, row):
        if (isinstance(value, bool) or not isinstance(value, numbers.Real)
                or not float(value).is_integer() or value < 0):
            raise PreconditionError('tile column and row must be integers >= 0, got (%r, %r)' % (
                column, row))
    return int(column), int(row)


class TileMatrix(object):
    """
    Grid geometry of one zoom level of a tile set.
    """
    def __init__(self, table_name, zoom_level, matrix_width, matrix_height,
                 tile_width, tile_height, pixel_x_size, pixel_y_size):
        self.table_name = check_table_name(table_name)
        self.zoom_level = check_zoom_level(zoom_level)
        self.matrix_width = _positive_int('matrix_width', matrix_width)
        self.matrix_height = _positive_int('matrix_height', matrix_height)
        self.tile_width = _positive_int('tile_width', tile_width)
        self.tile_height = _positive_int('tile_height', tile_height)
        self.pixel_x_size = _positive_float('pixel_x_size', pixel_x_size)
        self.pixel_y_size = _positive_float('pixel_y_size', pixel_y_size)

    @property
    def tile_size(self):
        return self.tile_width, self.tile_height

    @property
    def grid_size(self):
        return self.matrix_width, self.matrix_height

    @property
    def tile_width_in_srs(self):
        return self.pixel_x_size * self.tile_width

    @property
    def tile_height_in_srs(self):
        return self.pixel_y_size * self.tile_height

    @property
    def width_in_srs(self):
        return self.matrix_width * self.tile_width * self.pixel_x_size

    @property
    def height_in_srs(self):
        return self.matrix_height * self.tile_height * self.pixel_y_size

    def contains(self, column, row):
        return 0 <= column < self.matrix_width and 0 <= row < self.matrix_height

    def _key(self):
        return (self.table_name, self.zoom_level, self.matrix_width, self.matrix_height,
                self.tile_width, self.tile_height, self.pixel_x_size, self.pixel_y_size)

    def __eq__(self, other):
        if not isinstance(other, TileMatrix):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        return 'TileMatrix(%r, zoom_level=%d, grid=%dx%d, tile=%dx%d, pixel=(%r, %r))' % (
            self.table_name, self.zoom_level, self.matrix_width, self.matrix_height,
            self.tile_width, self.tile_height, self.pixel_x_size, self.pixel_y_size)


class Tile(object):
    """
    A stored tile. `data` is the encoded image.
    """
    def __init__(self, identifier, zoom_level, column, row, data):
        self.identifier = identifier
        self.zoom_level = check_zoom_level(zoom_level)
        self.column, self.row = check_tile_address(column, row)
        if not data:
            raise PreconditionError('tile data may not be empty')
        self.data = bytes(data)

    @property
    def coord(self):
        return TileCoordinate(self.column, self.row, self.zoom_level)

    def __eq__(self, other):
        if not isinstance(other, Tile):
            return NotImplemented
        return (self.identifier == other.identifier and
                self.coord == other.coord and
                self.data == other.data)

    def __hash__(self):
        return hash((self.identifier, self.coord))

    def __repr__(self):
        return 'Tile(%r, %r, %d bytes)' % (self.identifier, tuple(self.coord), len(self.data))
