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
The content and spatial reference system catalogs of a GeoPackage
(``gpkg_contents`` and ``gpkg_spatial_ref_sys``).
"""

import logging
import os
import time
from datetime import datetime, timezone

from gpkgtiles.exception import PreconditionError
from gpkgtiles.srs import SpatialReferenceSystem
from gpkgtiles.util.sqlite3 import sqlite3

log = logging.getLogger(__name__)

CONTENTS_TABLE = 'gpkg_contents'
SPATIAL_REF_SYS_TABLE = 'gpkg_spatial_ref_sys'


def now():
    """
    Current time in UTC, or ``SOURCE_DATE_EPOCH`` if set for
    reproducible files.
    """
    return datetime.fromtimestamp(
        int(os.environ.get('SOURCE_DATE_EPOCH', time.time())),
        timezone.utc
    )


class GeoPackageCore(object):
    def __init__(self, view):
        self.view = view

    def create_tables(self):
        """
        Create the catalog tables if they do not exist and add the
        spatial reference systems every GeoPackage contains.
        """
        with self.view.transaction():
            self.view.execute(create_spatial_ref_sys_statement)
            self.view.execute(create_gpkg_contents_statement)
            for entry in default_srs_entries:
                self.view.execute("""
                    INSERT OR IGNORE INTO gpkg_spatial_ref_sys (
                        srs_id,
                        organization,
                        organization_coordsys_id,
                        srs_name,
                        definition,
                        description)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, entry)

    def has_tables(self):
        return (self.view.table_exists(SPATIAL_REF_SYS_TABLE) and
                self.view.table_exists(CONTENTS_TABLE))

    def _srs_from_row(self, row):
        return SpatialReferenceSystem(
            row['srs_name'], row['srs_id'], row['organization'],
            row['organization_coordsys_id'], row['definition'], row['description'])

    def get_spatial_reference_system(self, srs_id):
        """
        Returns the catalog entry with `srs_id` or ``None``.
        """
        if not self.view.table_exists(SPATIAL_REF_SYS_TABLE):
            return None
        row = self.view.query_one(
            'SELECT * FROM gpkg_spatial_ref_sys WHERE srs_id = ?', (srs_id, ))
        return self._srs_from_row(row) if row else None

    def find_spatial_reference_system(self, organization, organization_srs_id):
        """
        Returns the catalog entry of `organization`:`organization_srs_id`
        or ``None``. The organization is matched case-insensitive.
        """
        if not self.view.table_exists(SPATIAL_REF_SYS_TABLE):
            return None
        row = self.view.query_one(
            'SELECT * FROM gpkg_spatial_ref_sys WHERE organization = ? COLLATE NOCASE'
            ' AND organization_coordsys_id = ?', (organization, organization_srs_id))
        return self._srs_from_row(row) if row else None

    def get_spatial_reference_systems(self):
        return [self._srs_from_row(row) for row in self.view.query(
            'SELECT * FROM gpkg_spatial_ref_sys ORDER BY srs_id')]

    def add_spatial_reference_system(self, name, identifier, organization, organization_srs_id,
                                     definition, description=None):
        """
        Add an entry to the catalog. Adding an entry that exists with the
        same values returns the existing one.
        """
        srs = SpatialReferenceSystem(name, identifier, organization, organization_srs_id,
                                     definition, description)
        existing = self.get_spatial_reference_system(identifier)
        if existing is not None:
            if existing.equals_fields(name, srs.identifier, organization, srs.organization_srs_id, definition):
                return existing
            raise PreconditionError('a different spatial reference system with srs_id %d exists' % srs.identifier)
        existing = self.find_spatial_reference_system(organization, organization_srs_id)
        if existing is not None:
            raise PreconditionError('%s is already defined with srs_id %d' % (srs.srs_code, existing.identifier))

        with self.view.transaction():
            self.view.execute("""
                INSERT INTO gpkg_spatial_ref_sys (
                    srs_id,
                    organization,
                    organization_coordsys_id,
                    srs_name,
                    definition,
                    description)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (srs.identifier, srs.organization, srs.organization_srs_id, srs.name,
                  srs.definition, srs.description))
        log.info('added spatial reference system %s as srs_id %d', srs.srs_code, srs.identifier)
        return srs

    def get_content(self, table_name):
        if not self.view.table_exists(CONTENTS_TABLE):
            return None
        return self.view.query_one(
            'SELECT * FROM gpkg_contents WHERE table_name = ? COLLATE NOCASE', (table_name, ))

    def get_contents(self, data_type=None, srs_id=None):
        sql = 'SELECT * FROM gpkg_contents'
        where = []
        params = []
        if data_type is not None:
            where.append('data_type = ?')
            params.append(data_type)
        if srs_id is not None:
            where.append('srs_id = ?')
            params.append(srs_id)
        if where:
            sql += ' WHERE ' + ' AND '.join(where)
        return self.view.query(sql + ' ORDER BY table_name', params)

    def add_content(self, table_name, data_type, identifier, description, bbox, srs_id, last_change=None):
        if last_change is None:
            last_change = now()
        try:
            self.view.execute("""
                INSERT INTO gpkg_contents (
                    table_name,
                    data_type,
                    identifier,
                    description,
                    last_change,
                    min_x,
                    min_y,
                    max_x,
                    max_y,
                    srs_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
                """, (table_name, data_type, identifier, description, last_change,
                      bbox[0], bbox[1], bbox[2], bbox[3], srs_id))
        except sqlite3.IntegrityError:
            log.info('unable to add %s to %s', table_name, CONTENTS_TABLE)
            raise
        return last_change


create_gpkg_contents_statement = """
    CREATE TABLE IF NOT EXISTS gpkg_contents(
        table_name  TEXT     NOT NULL PRIMARY KEY,
            -- The name of the tiles, or feature table
        data_type   TEXT     NOT NULL,
            -- Type of data stored in the table: "features", "tiles", or an
            -- implementer-defined value for other data tables
        identifier  TEXT     UNIQUE,
            -- A human-readable identifier (e.g. short name) for the table_name content
        description TEXT     DEFAULT '',
            -- A human-readable description for the table_name content
        last_change DATETIME NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now')),
            -- Timestamp value in ISO 8601 format
        min_x       DOUBLE,
            -- Bounding box minimum easting or longitude for all content in table_name
        min_y       DOUBLE,
            -- Bounding box minimum northing or latitude for all content in table_name
        max_x       DOUBLE,
            -- Bounding box maximum easting or longitude for all content in table_name
        max_y       DOUBLE,
            -- Bounding box maximum northing or latitude for all content in table_name
        srs_id      INTEGER,
            -- Spatial Reference System ID: gpkg_spatial_ref_sys.srs_id; when data_type is tiles,
            -- SHALL also match gpkg_tile_matrix_set.srs_id
        CONSTRAINT fk_gc_r_srs_id FOREIGN KEY (srs_id) REFERENCES gpkg_spatial_ref_sys(srs_id))
"""

create_spatial_ref_sys_statement = """
    CREATE TABLE IF NOT EXISTS gpkg_spatial_ref_sys(
        srs_name                 TEXT    NOT NULL,
          -- Human readable name of this SRS (Spatial Reference System)
        srs_id                   INTEGER NOT NULL PRIMARY KEY,
          -- Unique identifier for each Spatial Reference System within a GeoPackage
        organization             TEXT    NOT NULL,
          -- Case-insensitive name of the defining organization e.g. EPSG or epsg
        organization_coordsys_id INTEGER NOT NULL,
          -- Numeric ID of the Spatial Reference System assigned by the organization
        definition               TEXT    NOT NULL,
          -- Well-known Text representation of the Spatial Reference System
        description              TEXT)
"""


proj_string_4326 = """\
GEOGCS["WGS 84",DATUM["WGS_1984",SPHEROID["WGS 84",6378137,298.257223563,AUTHORITY["EPSG","7030"]],\
AUTHORITY["EPSG","6326"]],PRIMEM["Greenwich",0,AUTHORITY["EPSG","8901"]],UNIT["degree",0.0174532925199433,\
AUTHORITY["EPSG","9122"]],AUTHORITY["EPSG","4326"]]\
"""

# (srs_id, organization, organization_coordsys_id, srs_name, definition, description)
default_srs_entries = [
    (4326, 'EPSG', 4326, 'WGS 84', proj_string_4326, 'longitude/latitude coordinates in decimal degrees'),
    (-1, 'NONE', -1, 'Undefined cartesian SRS', 'undefined', 'undefined cartesian coordinate reference system'),
    (0, 'NONE', 0, 'Undefined geographic SRS', 'undefined', 'undefined geographic coordinate reference system'),
]
