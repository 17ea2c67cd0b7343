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

from gpkgtiles.cache.geopackage import create_table_statement
from gpkgtiles.test.image import create_tmp_image
from gpkgtiles.util.sqlite3 import sqlite3
from gpkgtiles.verify import Severity, VerificationLevel
from gpkgtiles.verify.rules import (
    Rule,
    RuleContext,
    find_pyramid_tables,
    get_rule,
    registry,
)


@pytest.fixture
def pyramid(gpkg, tile_set):
    """
    Valid pyramid with two zoom levels and both tiles of zoom level 0.
    """
    zero = gpkg.tiles.add_tile_matrix_for_bounds(tile_set, 0, 2, 1, 256, 256)
    gpkg.tiles.add_tile_matrix_for_bounds(tile_set, 1, 4, 2, 256, 256)
    png = create_tmp_image((256, 256))
    gpkg.tiles.add_tile(tile_set, zero, 0, 0, png)
    gpkg.tiles.add_tile(tile_set, zero, 1, 0, png)
    return gpkg.view


@pytest.fixture
def no_foreign_keys(pyramid):
    pyramid.pragma('foreign_keys', 0)
    return pyramid


def check(view, rule_id, tile_formats=('png', 'jpeg')):
    return get_rule(rule_id).run(RuleContext(view, tile_formats))


def insert_tile(view, zoom_level, column, row, data=b'data', table='world'):
    view.execute(
        'INSERT INTO %s (zoom_level, tile_column, tile_row, tile_data) VALUES (?, ?, ?, ?)' % table,
        (zoom_level, column, row, data))


def insert_matrix(view, zoom_level, matrix_width, matrix_height, pixel_x_size, pixel_y_size, table='world'):
    view.execute(
        'INSERT INTO gpkg_tile_matrix (table_name, zoom_level, matrix_width, matrix_height,'
        ' tile_width, tile_height, pixel_x_size, pixel_y_size) VALUES (?, ?, ?, ?, 256, 256, ?, ?)',
        (table, zoom_level, matrix_width, matrix_height, pixel_x_size, pixel_y_size))


class TestRegistry(object):

    def test_valid_pyramid_has_no_issues(self, pyramid):
        ctx = RuleContext(pyramid)
        for rule in registry.values():
            assert rule.run(ctx) == [], rule.identifier

    def test_empty_geopackage_has_no_issues(self, gpkg):
        ctx = RuleContext(gpkg.view)
        assert ctx.pyramid_tables == []
        for rule in registry.values():
            assert rule.run(ctx) == []

    def test_rule_identifiers(self):
        assert len(registry) == 26
        for identifier, rule in registry.items():
            assert rule.identifier == identifier
            assert rule.severity in (Severity.ERROR, Severity.WARNING)
        assert [r.identifier for r in registry.values() if r.full_only] == ['tile_data_format']

    def test_run_reports_database_errors(self, pyramid):
        def broken(rule, ctx):
            ctx.view.execute('SELECT * FROM missing_table')

        rule = Rule('broken', 'Requirement 0', 'text', Severity.WARNING, broken)
        issues = rule.run(RuleContext(pyramid))
        assert len(issues) == 1
        assert issues[0].severity is Severity.ERROR
        assert 'missing_table' in issues[0].message

    def test_skipped_issue(self):
        issue = get_rule('tile_data_format').skipped(VerificationLevel.FAST)
        assert issue.severity is Severity.SKIPPED
        assert str(issue).startswith('[SKIPPED] Requirement 36: ')


class TestFindPyramidTables(object):

    def test_only_tables_with_pyramid_schema(self, pyramid):
        pyramid.execute('CREATE TABLE other (id INTEGER PRIMARY KEY, name TEXT)')
        pyramid.execute(create_table_statement.format('"second"'))
        assert find_pyramid_tables(pyramid) == ['second', 'world']

    def test_missing_unique_constraint(self, pyramid):
        pyramid.execute(
            'CREATE TABLE no_unique (id INTEGER PRIMARY KEY AUTOINCREMENT, zoom_level INTEGER NOT NULL,'
            ' tile_column INTEGER NOT NULL, tile_row INTEGER NOT NULL, tile_data BLOB NOT NULL)')
        assert find_pyramid_tables(pyramid) == ['world']


class TestContentsReferences(object):

    def test_pyramid_table_not_in_contents(self, pyramid):
        pyramid.execute(create_table_statement.format('"orphan"'))
        issues = check(pyramid, 'pyramid_tables_in_contents')
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].table_name == 'orphan'
        assert issues[0].reference == 'Requirement 34'

    def test_tile_matrix_set_not_in_contents(self, no_foreign_keys):
        no_foreign_keys.execute(
            "INSERT INTO gpkg_tile_matrix_set VALUES ('ghost', 4326, 0, 0, 1, 1)")
        issues = check(no_foreign_keys, 'tile_matrix_set_contents_reference')
        assert [i.table_name for i in issues] == ['ghost']

    def test_pyramid_table_not_in_tile_matrix_set(self, pyramid):
        pyramid.execute("DELETE FROM gpkg_tile_matrix_set WHERE table_name = 'world'")
        issues = check(pyramid, 'tile_matrix_set_row_per_table')
        assert len(issues) == 1
        assert issues[0].is_error
        issues = check(pyramid, 'contents_tables_exist')
        assert len(issues) == 1
        assert 'does not have a record in gpkg_tile_matrix_set' in issues[0].message

    def test_tile_matrix_not_in_contents(self, no_foreign_keys):
        insert_matrix(no_foreign_keys, 0, 1, 1, 1, 1, table='ghost')
        issues = check(no_foreign_keys, 'tile_matrix_contents_reference')
        assert [i.table_name for i in issues] == ['ghost']
        assert issues[0].severity is Severity.WARNING

    def test_contents_table_missing(self, pyramid):
        pyramid.execute(
            "INSERT INTO gpkg_contents (table_name, data_type, identifier, srs_id)"
            " VALUES ('missing', 'tiles', 'missing', 4326)")
        issues = check(pyramid, 'contents_tables_exist')
        assert any('missing does not exist' in i.message for i in issues)
        assert all(i.is_error for i in issues)

    def test_contents_table_with_wrong_schema(self, pyramid):
        pyramid.execute('CREATE TABLE bad (id INTEGER PRIMARY KEY, tile_data TEXT)')
        pyramid.execute(
            "INSERT INTO gpkg_contents (table_name, data_type, identifier, srs_id)"
            " VALUES ('bad', 'tiles', 'bad', 4326)")
        messages = [i.message for i in check(pyramid, 'contents_tables_exist')
                    if i.table_name == 'bad']
        assert 'Required column: bad.zoom_level is missing' in messages
        assert any('bad.tile_data is defined as: TEXT' in m for m in messages)


class TestMetadataTables(object):

    def test_missing_tile_matrix_table(self, no_foreign_keys):
        no_foreign_keys.execute('DROP TABLE gpkg_tile_matrix')
        issues = check(no_foreign_keys, 'tile_matrix_table')
        assert len(issues) == 1
        assert issues[0].is_error

    def test_missing_tile_matrix_set_table(self, no_foreign_keys):
        no_foreign_keys.execute('DROP TABLE gpkg_tile_matrix_set')
        issues = check(no_foreign_keys, 'tile_matrix_set_table')
        assert len(issues) == 1
        assert issues[0].is_error

    def test_tile_matrix_set_schema(self, no_foreign_keys):
        view = no_foreign_keys
        view.execute('DROP TABLE gpkg_tile_matrix_set')
        view.execute(
            'CREATE TABLE gpkg_tile_matrix_set (table_name TEXT NOT NULL PRIMARY KEY,'
            ' srs_id INTEGER NOT NULL, min_x DOUBLE, min_y DOUBLE NOT NULL,'
            ' max_x DOUBLE NOT NULL, max_y DOUBLE NOT NULL)')
        messages = [i.message for i in check(view, 'tile_matrix_set_table')]
        assert any('gpkg_tile_matrix_set.min_x' in m for m in messages)
        assert any('foreign key' in m and 'gpkg_spatial_ref_sys' in m for m in messages)
        assert any('foreign key' in m and 'gpkg_contents' in m for m in messages)

    def test_not_checked_without_pyramids(self, gpkg):
        assert check(gpkg.view, 'tile_matrix_table') == []
        assert check(gpkg.view, 'tile_matrix_set_table') == []


class TestSpatialReferences(object):

    def test_unknown_tile_matrix_set_srs(self, no_foreign_keys):
        no_foreign_keys.execute('UPDATE gpkg_tile_matrix_set SET srs_id = 9999')
        issues = check(no_foreign_keys, 'tile_matrix_set_srs_reference')
        assert len(issues) == 1
        assert '9999' in issues[0].message
        issues = check(no_foreign_keys, 'tile_matrix_srs_reference')
        assert len(issues) == 1
        assert issues[0].table_name == 'world'

    def test_contents_srs_mismatch(self, pyramid):
        pyramid.execute("UPDATE gpkg_contents SET srs_id = 0 WHERE table_name = 'world'")
        issues = check(pyramid, 'contents_srs_matches_tile_matrix_set')
        assert len(issues) == 1
        assert issues[0].is_error


class TestTileMatrixValues(object):

    @pytest.mark.parametrize('rule_id,column,value', [
        ('zoom_level_non_negative', 'zoom_level', -1),
        ('matrix_width_positive', 'matrix_width', 0),
        ('matrix_height_positive', 'matrix_height', -2),
        ('tile_width_positive', 'tile_width', 0),
        ('tile_height_positive', 'tile_height', 0),
        ('pixel_x_size_positive', 'pixel_x_size', 0),
        ('pixel_y_size_positive', 'pixel_y_size', -0.5),
    ])
    def test_minimum_values(self, pyramid, rule_id, column, value):
        assert check(pyramid, rule_id) == []
        pyramid.execute('UPDATE gpkg_tile_matrix SET %s = ? WHERE zoom_level = 1' % column, (value, ))
        issues = check(pyramid, rule_id)
        assert len(issues) == 1
        assert issues[0].is_error
        assert column in issues[0].message

    def test_zoom_level_zero_is_valid(self, pyramid):
        assert check(pyramid, 'zoom_level_non_negative') == []

    def test_pixel_sizes_not_halved(self, pyramid):
        insert_matrix(pyramid, 2, 8, 4, 0.2, 0.2)
        issues = check(pyramid, 'pixel_size_factor_two')
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING

    def test_pixel_sizes_halved_with_gap(self, pyramid):
        # only adjacent zoom levels are compared
        insert_matrix(pyramid, 5, 64, 32, 0.01, 0.01)
        assert check(pyramid, 'pixel_size_factor_two') == []

    def test_pixel_sizes_not_decreasing(self, pyramid):
        insert_matrix(pyramid, 2, 8, 4, 0.5, 0.1)
        issues = check(pyramid, 'pixel_size_decreasing')
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].reference == 'Requirement 52'

    def test_pixel_sizes_match_bounds(self, pyramid):
        insert_matrix(pyramid, 2, 8, 4, 0.17, 360 / 8 / 256 / 2)
        issues = check(pyramid, 'pixel_size_matches_bounds')
        assert len(issues) == 1
        assert 'zoom level 2' in issues[0].message


class TestTiles(object):

    def test_tile_zoom_without_matrix(self, pyramid):
        insert_tile(pyramid, 3, 0, 0)
        issues = check(pyramid, 'tile_matrix_row_per_zoom')
        assert len(issues) == 1
        assert 'zoom level 3' in issues[0].message

    def test_tile_zoom_out_of_range(self, pyramid):
        insert_tile(pyramid, 2, 0, 0)
        issues = check(pyramid, 'tile_zoom_in_range')
        assert len(issues) == 1
        assert issues[0].is_error
        assert '[0, 1]' in issues[0].message

    def test_tile_column_out_of_range(self, pyramid):
        insert_tile(pyramid, 0, 2, 0)
        issues = check(pyramid, 'tile_column_in_range')
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert check(pyramid, 'tile_row_in_range') == []

    def test_tile_row_out_of_range(self, pyramid):
        insert_tile(pyramid, 1, 0, -1)
        assert len(check(pyramid, 'tile_row_in_range')) == 1
        assert check(pyramid, 'tile_column_in_range') == []

    def test_tile_data_format(self, pyramid):
        insert_tile(pyramid, 1, 0, 0, b'no image')
        insert_tile(pyramid, 1, 1, 0, create_tmp_image((256, 256), format='jpeg'))
        insert_tile(pyramid, 1, 2, 0, create_tmp_image((256, 256), format='gif'))
        issues = check(pyramid, 'tile_data_format')
        assert len(issues) == 1
        assert issues[0].severity is Severity.WARNING
        assert issues[0].message.endswith(': 3, 5.')

    def test_tile_data_format_configured(self, pyramid):
        insert_tile(pyramid, 1, 1, 0, create_tmp_image((256, 256), format='jpeg'))
        issues = check(pyramid, 'tile_data_format', tile_formats=('png', ))
        assert len(issues) == 1
        assert issues[0].message.endswith(': 3.')

    def test_truncated_png(self, pyramid):
        insert_tile(pyramid, 1, 0, 0, create_tmp_image((256, 256))[:100])
        assert len(check(pyramid, 'tile_data_format')) == 1


class TestMinimumBoundingBox(object):

    def test_exact(self, pyramid):
        assert check(pyramid, 'minimum_bounding_box_exact') == []

    def test_empty_pyramid(self, gpkg, tile_set):
        gpkg.tiles.add_tile_matrix_for_bounds(tile_set, 0, 2, 1, 256, 256)
        assert check(gpkg.view, 'minimum_bounding_box_exact') == []

    def test_missing_max_column(self, pyramid):
        pyramid.execute('DELETE FROM world WHERE tile_column = 1')
        issues = check(pyramid, 'minimum_bounding_box_exact')
        assert len(issues) == 1
        assert 'maximum column' in issues[0].message
        assert 'minimum row' not in issues[0].message

    def test_extremes_on_different_levels(self, pyramid):
        pyramid.execute('DELETE FROM world WHERE tile_column = 1')
        insert_tile(pyramid, 1, 3, 1)
        assert check(pyramid, 'minimum_bounding_box_exact') == []


def test_rule_run_catches_type_errors(pyramid):
    pyramid.execute("UPDATE gpkg_tile_matrix SET pixel_x_size = 'abc' WHERE zoom_level = 1")
    issues = check(pyramid, 'pixel_size_factor_two')
    assert len(issues) == 1
    assert issues[0].is_error
