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
Storage of tile pyramids in a GeoPackage.
"""

import logging

from gpkgtiles.core import GeoPackageCore
from gpkgtiles.exception import PreconditionError
from gpkgtiles.grid.tile_grid import to_coordinate, to_tile_address
from gpkgtiles.pyramid import (
    BoundingBox,
    Tile,
    TileCoordinate,
    TileMatrix,
    TileMatrixSet,
    TileSet,
    check_table_name,
    check_tile_address,
    check_zoom_level,
)
from gpkgtiles.srs import SpatialReferenceSystem, precision_for_srs
from gpkgtiles.util.sqlite3 import quote_identifier

log = logging.getLogger(__name__)


class GeopackageTiles(object):
    """
    Tile sets, tile matrices and tiles of one GeoPackage.

    `precision_conf` is the ``precision`` section of the configuration.
    It decides the tolerance used to reconcile tile matrices with the
    bounds of their tile matrix set.
    """
    def __init__(self, view, core=None, precision_conf=None):
        self.view = view
        self.core = core or GeoPackageCore(view)
        if precision_conf is None:
            from gpkgtiles.config.config import load_default_config
            precision_conf = load_default_config().precision
        self.precision_conf = precision_conf

    def create_tables(self):
        with self.view.transaction():
            self.core.create_tables()
            self.view.execute(create_tile_matrix_set_statement)
            self.view.execute(create_tile_matrix_statement)

    def precision(self, tile_set):
        """
        Default number of decimal digits for bounds of `tile_set`.
        """
        return precision_for_srs(self._srs(tile_set), self.precision_conf)

    def _srs(self, tile_set):
        srs = self.core.get_spatial_reference_system(tile_set.srs_id)
        if srs is None:
            raise PreconditionError('the srs_id %d of tile set %s is not defined' % (
                tile_set.srs_id, tile_set.table_name))
        return srs

    def add_tile_set(self, table_name, identifier, description, bounding_box, srs):
        """
        Create a new tile pyramid.

        Adding a tile set that exists with the same values returns the
        existing one. Returns the new :class:`~gpkgtiles.pyramid.TileSet`.

        :param srs: a :class:`~gpkgtiles.srs.SpatialReferenceSystem` of
                    the catalog
        """
        check_table_name(table_name)
        if bounding_box is None:
            raise PreconditionError('bounding box may not be None')
        bbox = BoundingBox(*bounding_box)
        if not isinstance(srs, SpatialReferenceSystem):
            raise PreconditionError('srs must be a SpatialReferenceSystem, got %r' % (srs, ))

        existing = self.get_tile_set(table_name)
        if existing is not None:
            if existing.equals_fields(table_name, identifier, description, bbox, srs.identifier):
                return existing
            raise PreconditionError('a tile set named %s with different values already exists' % table_name)
        if self.view.table_exists(table_name):
            raise PreconditionError('a table named %s already exists' % table_name)

        catalog_srs = self.core.get_spatial_reference_system(srs.identifier)
        if catalog_srs is None or not catalog_srs.equals_fields(
                srs.name, srs.identifier, srs.organization, srs.organization_srs_id, srs.definition):
            raise PreconditionError('spatial reference system %r is not in the catalog' % (srs, ))

        with self.view.transaction():
            self.create_tables()
            self.view.execute(create_table_statement.format(quote_identifier(table_name)))
            self.core.add_content(
                table_name, TileSet.data_type, identifier, description, bbox, srs.identifier)
            self.view.execute("""
                INSERT INTO gpkg_tile_matrix_set (table_name, srs_id, min_x, min_y, max_x, max_y)
                VALUES (?, ?, ?, ?, ?, ?);
            """, (table_name, srs.identifier, bbox[0], bbox[1], bbox[2], bbox[3]))
        log.info('created tile set %s', table_name)

        return self.get_tile_set(table_name)

    def _tile_set_from_row(self, row):
        bbox = (row['min_x'], row['min_y'], row['max_x'], row['max_y'])
        srs_id = row['srs_id']
        if None in bbox or srs_id is None:
            matrix_set = self._tile_matrix_set(row['table_name'])
            if matrix_set is not None:
                if None in bbox:
                    bbox = matrix_set.bounding_box
                if srs_id is None:
                    srs_id = matrix_set.srs_id
        return TileSet(row['table_name'], row['identifier'], row['description'],
                       row['last_change'], bbox, srs_id)

    def get_tile_set(self, table_name):
        """
        Returns the tile set stored in `table_name` or ``None``.
        """
        row = self.core.get_content(table_name)
        if row is None or row['data_type'] != TileSet.data_type:
            return None
        return self._tile_set_from_row(row)

    def get_tile_sets(self, srs=None):
        """
        Returns all tile sets, optionally only those in `srs`.
        """
        if not self.core.has_tables():
            return []
        srs_id = srs.identifier if srs is not None else None
        return [self._tile_set_from_row(row)
                for row in self.core.get_contents(data_type=TileSet.data_type, srs_id=srs_id)]

    def _tile_matrix_set(self, table_name):
        if not self.view.table_exists('gpkg_tile_matrix_set'):
            return None
        row = self.view.query_one(
            'SELECT * FROM gpkg_tile_matrix_set WHERE table_name = ?', (table_name, ))
        if row is None:
            return None
        return TileMatrixSet(row['table_name'], row['srs_id'],
                             (row['min_x'], row['min_y'], row['max_x'], row['max_y']))

    def get_tile_matrix_set(self, tile_set):
        return self._tile_matrix_set(tile_set.table_name)

    def add_tile_matrix(self, tile_set, zoom_level, matrix_width, matrix_height,
                        tile_width, tile_height, pixel_x_size, pixel_y_size, precision=None):
        """
        Add the tile matrix for `zoom_level` to `tile_set`.

        The extent of the matrix (``matrix_width * tile_width * pixel_x_size``
        and the same for the height) must match the tile matrix set bounds
        within ``10 ** -precision``. `precision` defaults to the
        configured precision for the reference system of the tile set.
        Adding a tile matrix that exists with the same values returns the
        existing one.
        """
        if tile_set is None:
            raise PreconditionError('tile set may not be None')
        matrix = TileMatrix(tile_set.table_name, zoom_level, matrix_width, matrix_height,
                            tile_width, tile_height, pixel_x_size, pixel_y_size)

        existing = self.get_tile_matrix(tile_set, matrix.zoom_level)
        if existing is not None:
            if existing == matrix:
                return existing
            raise PreconditionError('a different tile matrix for zoom level %d of %s already exists' % (
                matrix.zoom_level, tile_set.table_name))

        matrix_set = self.get_tile_matrix_set(tile_set)
        if matrix_set is None:
            raise PreconditionError('tile set %s has no tile matrix set' % tile_set.table_name)
        if precision is None:
            precision = self.precision(tile_set)
        tolerance = 10 ** -precision

        bbox = matrix_set.bounding_box
        if abs(matrix.width_in_srs - bbox.width) >= tolerance:
            raise PreconditionError(
                'the width of tile matrix %d of %s (matrix_width * tile_width * pixel_x_size = %r)'
                ' does not match the width of the tile matrix set bounds (%r)' % (
                    matrix.zoom_level, tile_set.table_name, matrix.width_in_srs, bbox.width))
        if abs(matrix.height_in_srs - bbox.height) >= tolerance:
            raise PreconditionError(
                'the height of tile matrix %d of %s (matrix_height * tile_height * pixel_y_size = %r)'
                ' does not match the height of the tile matrix set bounds (%r)' % (
                    matrix.zoom_level, tile_set.table_name, matrix.height_in_srs, bbox.height))

        with self.view.transaction():
            self.view.execute("""
                INSERT INTO gpkg_tile_matrix (table_name, zoom_level, matrix_width,
                    matrix_height, tile_width, tile_height, pixel_x_size, pixel_y_size)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?);
                """, (matrix.table_name, matrix.zoom_level, matrix.matrix_width, matrix.matrix_height,
                      matrix.tile_width, matrix.tile_height, matrix.pixel_x_size, matrix.pixel_y_size))
        log.debug('added tile matrix %d to %s', matrix.zoom_level, tile_set.table_name)
        return matrix

    def add_tile_matrix_for_bounds(self, tile_set, zoom_level, matrix_width, matrix_height,
                                   tile_width, tile_height):
        """
        Add a tile matrix with pixel sizes derived from the tile matrix set
        bounds.
        """
        matrix_set = self.get_tile_matrix_set(tile_set)
        if matrix_set is None:
            raise PreconditionError('tile set %s has no tile matrix set' % tile_set.table_name)
        # validate before dividing by the dimensions
        TileMatrix(tile_set.table_name, zoom_level, matrix_width, matrix_height,
                   tile_width, tile_height, 1, 1)
        bbox = matrix_set.bounding_box
        pixel_x_size = bbox.width / matrix_width / tile_width
        pixel_y_size = bbox.height / matrix_height / tile_height
        return self.add_tile_matrix(tile_set, zoom_level, matrix_width, matrix_height,
                                    tile_width, tile_height, pixel_x_size, pixel_y_size)

    def _matrix_from_row(self, row):
        return TileMatrix(row['table_name'], row['zoom_level'], row['matrix_width'], row['matrix_height'],
                          row['tile_width'], row['tile_height'], row['pixel_x_size'], row['pixel_y_size'])

    def get_tile_matrix(self, tile_set, zoom_level):
        """
        Returns the tile matrix of `zoom_level` or ``None``.
        """
        if not self.view.table_exists('gpkg_tile_matrix'):
            return None
        row = self.view.query_one(
            'SELECT * FROM gpkg_tile_matrix WHERE table_name = ? AND zoom_level = ?',
            (tile_set.table_name, zoom_level))
        return self._matrix_from_row(row) if row else None

    def get_tile_matrices(self, tile_set):
        """
        Returns all tile matrices of `tile_set` ordered by zoom level.
        """
        if not self.view.table_exists('gpkg_tile_matrix'):
            return []
        return [self._matrix_from_row(row) for row in self.view.query(
            'SELECT * FROM gpkg_tile_matrix WHERE table_name = ? ORDER BY zoom_level ASC',
            (tile_set.table_name, ))]

    def get_tile_zoom_levels(self, tile_set):
        return set(m.zoom_level for m in self.get_tile_matrices(tile_set))

    def _require_tile_matrix(self, tile_set, zoom_level):
        check_zoom_level(zoom_level)
        matrix = self.get_tile_matrix(tile_set, zoom_level)
        if matrix is None:
            raise PreconditionError('tile set %s has no tile matrix for zoom level %d' % (
                tile_set.table_name, zoom_level))
        return matrix

    def add_tile(self, tile_set, tile_matrix, column, row, data):
        """
        Store a tile. Adding a second tile at the same address raises
        ``sqlite3.IntegrityError``.
        """
        tile_matrix = self._require_stored_matrix(tile_set, tile_matrix)
        if not data:
            raise PreconditionError('tile data may not be empty')
        column, row = check_tile_address(column, row)
        if not tile_matrix.contains(column, row):
            raise PreconditionError('tile (%d, %d) is outside of the %dx%d tile matrix %d of %s' % (
                column, row, tile_matrix.matrix_width, tile_matrix.matrix_height,
                tile_matrix.zoom_level, tile_set.table_name))

        with self.view.transaction():
            cur = self.view.execute(
                'INSERT INTO %s (zoom_level, tile_column, tile_row, tile_data) VALUES (?, ?, ?, ?)'
                % quote_identifier(tile_set.table_name),
                (tile_matrix.zoom_level, column, row, bytes(data)))
        return Tile(cur.lastrowid, tile_matrix.zoom_level, column, row, data)

    def _require_stored_matrix(self, tile_set, tile_matrix):
        """
        Returns the stored tile matrix equal to `tile_matrix`.
        """
        if tile_set is None or tile_matrix is None:
            raise PreconditionError('tile set and tile matrix may not be None')
        if tile_matrix.table_name != tile_set.table_name:
            raise PreconditionError('tile matrix %d does not belong to tile set %s' % (
                tile_matrix.zoom_level, tile_set.table_name))
        stored = self._require_tile_matrix(tile_set, tile_matrix.zoom_level)
        if stored != tile_matrix:
            raise PreconditionError('tile matrix %d differs from the stored tile matrix of %s: %r' % (
                tile_matrix.zoom_level, tile_set.table_name, stored))
        return stored

    def add_tile_at(self, tile_set, tile_matrix, coordinate, precision, data):
        """
        Store a tile at the tile address that contains `coordinate`.
        """
        tile_matrix = self._require_stored_matrix(tile_set, tile_matrix)
        matrix_set = self.get_tile_matrix_set(tile_set)
        if matrix_set is None:
            raise PreconditionError('tile set %s has no tile matrix set' % tile_set.table_name)
        column, row = to_tile_address(tile_set, matrix_set, tile_matrix, coordinate,
                                      precision, self._srs(tile_set))
        return self.add_tile(tile_set, tile_matrix, column, row, data)

    def get_tile(self, tile_set, column, row, zoom_level):
        """
        Returns the :class:`~gpkgtiles.pyramid.Tile` at the address or ``None``.
        """
        result = self.view.query_one(
            'SELECT id, zoom_level, tile_column, tile_row, tile_data FROM %s'
            ' WHERE tile_column = ? AND tile_row = ? AND zoom_level = ?'
            % quote_identifier(tile_set.table_name), (column, row, zoom_level))
        if result is None:
            return None
        return Tile(result['id'], result['zoom_level'], result['tile_column'],
                    result['tile_row'], result['tile_data'])

    def get_tile_at(self, tile_set, coordinate, precision, zoom_level):
        address = self.crs_to_tile_coordinate(tile_set, coordinate, precision, zoom_level)
        return self.get_tile(tile_set, address.column, address.row, address.zoom_level)

    def get_tiles(self, tile_set, zoom_level=None):
        """
        Yields the addresses of all stored tiles, optionally only of one
        zoom level.
        """
        sql = 'SELECT tile_column, tile_row, zoom_level FROM %s' % quote_identifier(tile_set.table_name)
        params = ()
        if zoom_level is not None:
            sql += ' WHERE zoom_level = ?'
            params = (zoom_level, )
        sql += ' ORDER BY zoom_level, tile_row, tile_column'
        for row in self.view.iter_query(sql, params):
            yield TileCoordinate(row[0], row[1], row[2])

    def count_tiles(self, tile_set):
        return self.view.query_value(
            'SELECT count(*) FROM %s' % quote_identifier(tile_set.table_name), default=0)

    def crs_to_tile_coordinate(self, tile_set, coordinate, precision, zoom_level):
        """
        Returns the :class:`~gpkgtiles.pyramid.TileCoordinate` of the tile
        at `zoom_level` that contains `coordinate`.
        """
        if tile_set is None or coordinate is None:
            raise PreconditionError('tile set and coordinate may not be None')
        matrix = self._require_tile_matrix(tile_set, zoom_level)
        matrix_set = self.get_tile_matrix_set(tile_set)
        if matrix_set is None:
            raise PreconditionError('tile set %s has no tile matrix set' % tile_set.table_name)
        column, row = to_tile_address(tile_set, matrix_set, matrix, coordinate,
                                      precision, self._srs(tile_set))
        return TileCoordinate(column, row, matrix.zoom_level)

    def tile_to_crs_coordinate(self, tile_set, column, row, zoom_level):
        """
        Returns the upper left corner of the tile as
        :class:`~gpkgtiles.srs.CrsCoordinate`.
        """
        if tile_set is None:
            raise PreconditionError('tile set may not be None')
        matrix = self._require_tile_matrix(tile_set, zoom_level)
        matrix_set = self.get_tile_matrix_set(tile_set)
        if matrix_set is None:
            raise PreconditionError('tile set %s has no tile matrix set' % tile_set.table_name)
        return to_coordinate(tile_set, matrix_set, matrix, column, row, self._srs(tile_set))


create_tile_matrix_statement = """
    CREATE TABLE IF NOT EXISTS gpkg_tile_matrix
         (table_name    TEXT    NOT NULL, -- Tile Pyramid User Data Table Name
          zoom_level    INTEGER NOT NULL, -- 0 <= zoom_level <= max_level for table_name
          matrix_width  INTEGER NOT NULL, -- Number of columns (>= 1) in tile matrix at this zoom level
          matrix_height INTEGER NOT NULL, -- Number of rows (>= 1) in tile matrix at this zoom level
          tile_width    INTEGER NOT NULL, -- Tile width in pixels (>= 1) for this zoom level
          tile_height   INTEGER NOT NULL, -- Tile height in pixels (>= 1) for this zoom level
          pixel_x_size  DOUBLE  NOT NULL, -- In t_table_name srid units or default meters for srid 0 (>0)
          pixel_y_size  DOUBLE  NOT NULL, -- In t_table_name srid units or default meters for srid 0 (>0)
          CONSTRAINT pk_ttm PRIMARY KEY (table_name, zoom_level),
          CONSTRAINT fk_tmm_table_name FOREIGN KEY (table_name) REFERENCES gpkg_contents(table_name))
"""

create_tile_matrix_set_statement = """
    CREATE TABLE IF NOT EXISTS gpkg_tile_matrix_set(
        table_name TEXT    NOT NULL PRIMARY KEY,
            -- Tile Pyramid User Data Table Name
        srs_id     INTEGER NOT NULL,
            -- Spatial Reference System ID: gpkg_spatial_ref_sys.srs_id
        min_x      DOUBLE  NOT NULL,
            -- Bounding box minimum easting or longitude for all content in table_name
        min_y      DOUBLE  NOT NULL,
            -- Bounding box minimum northing or latitude for all content in table_name
        max_x      DOUBLE  NOT NULL,
            -- Bounding box maximum easting or longitude for all content in table_name
        max_y      DOUBLE  NOT NULL,
            -- Bounding box maximum northing or latitude for all content in table_name
        CONSTRAINT fk_gtms_table_name FOREIGN KEY (table_name) REFERENCES gpkg_contents(table_name),
        CONSTRAINT fk_gtms_srs FOREIGN KEY (srs_id) REFERENCES gpkg_spatial_ref_sys (srs_id))
"""

create_table_statement = """
    CREATE TABLE {0}
        (id          INTEGER PRIMARY KEY AUTOINCREMENT, -- Autoincrement primary key
         zoom_level  INTEGER NOT NULL,                  -- min(zoom_level) <= zoom_level <= max(zoom_level)
            -- for t_table_name
         tile_column INTEGER NOT NULL,                  -- 0 to tile_matrix matrix_width - 1
         tile_row    INTEGER NOT NULL,                  -- 0 to tile_matrix matrix_height - 1
         tile_data   BLOB    NOT NULL,                  -- Of an image MIME type specified in clauses Tile
            -- Encoding PNG, Tile Encoding JPEG
         UNIQUE (zoom_level, tile_column, tile_row))
"""
