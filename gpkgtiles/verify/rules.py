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
Requirements for tile pyramids and the checks that verify them.

Every rule is independent. A check receives the rule and a
:class:`RuleContext` and returns the issues it found. It never raises for
a violated requirement. :data:`registry` lists all rules in the order they
run.
"""

import logging
from collections import OrderedDict

from gpkgtiles.image import TILE_FORMATS, decodable_format
from gpkgtiles.util.sqlite3 import quote_identifier, sqlite3
from gpkgtiles.verify import Severity, VerificationIssue
from gpkgtiles.verify.table import (
    CONTENTS_TABLE,
    SPATIAL_REF_SYS_TABLE,
    TILE_MATRIX_SET_TABLE,
    TILE_MATRIX_TABLE,
    tile_matrix_definition,
    tile_matrix_set_definition,
    tile_pyramid_definition,
)

log = logging.getLogger(__name__)

#: Tolerance for comparing pixel sizes.
EPSILON = 0.0001


def is_equal(a, b):
    """
    >>> is_equal(0.5, 0.50009)
    True
    >>> is_equal(0.5, 0.5002)
    False
    """
    return abs(a - b) < EPSILON


class Rule(object):
    def __init__(self, identifier, reference, text, severity, check, full_only=False):
        self.identifier = identifier
        self.reference = reference
        self.text = text
        self.severity = severity
        self.check = check
        self.full_only = full_only

    def issue(self, message, table_name=None, severity=None):
        return VerificationIssue(self.identifier, self.reference, severity or self.severity,
                                 message, table_name=table_name)

    def skipped(self, level):
        return self.issue('Skipped at verification level %s' % level.value, severity=Severity.SKIPPED)

    def run(self, context):
        """
        Run the check. Database errors and values of unexpected type in the
        metadata tables are reported as an Error issue of this rule.
        """
        try:
            return list(self.check(self, context))
        except (sqlite3.Error, TypeError, ValueError) as ex:
            log.warning('verifying %s failed: %s', self.reference, ex)
            return [self.issue('Unexpected error when testing %s: %s' % (self.reference, ex),
                               severity=Severity.ERROR)]

    def __repr__(self):
        return 'Rule(%r, %r, %s)' % (self.identifier, self.reference, self.severity)


def find_pyramid_tables(view):
    """
    Returns the names of all user tables that have the structure of a tile
    pyramid user data table.
    """
    names = [row[0] for row in view.query(
        "SELECT tbl_name FROM sqlite_master WHERE type = 'table'"
        " AND lower(substr(tbl_name, 1, 5)) != 'gpkg_'"
        " AND lower(substr(tbl_name, 1, 7)) != 'sqlite_'"
        " ORDER BY tbl_name")]
    return [name for name in names if tile_pyramid_definition(name).matches(view)]


class RuleContext(object):
    """
    Facts about the file that most rules need. Collected once per
    verification run.
    """
    def __init__(self, view, tile_formats=TILE_FORMATS):
        self.view = view
        self.tile_formats = tuple(tile_formats)
        self.has_contents_table = view.table_exists(CONTENTS_TABLE)
        self.has_spatial_ref_sys_table = view.table_exists(SPATIAL_REF_SYS_TABLE)
        self.has_tile_matrix_set_table = view.table_exists(TILE_MATRIX_SET_TABLE)
        self.has_tile_matrix_table = view.table_exists(TILE_MATRIX_TABLE)

        self.pyramid_tables = find_pyramid_tables(view)

        if self.has_contents_table:
            self.contents_tiles_tables = [row[0] for row in view.query(
                "SELECT table_name FROM gpkg_contents WHERE data_type = 'tiles' ORDER BY table_name")
                if row[0] is not None]
        else:
            self.contents_tiles_tables = []

        if self.has_tile_matrix_set_table:
            self.tile_matrix_set_tables = [row[0] for row in view.query(
                'SELECT table_name FROM gpkg_tile_matrix_set ORDER BY table_name')
                if row[0] is not None]
        else:
            self.tile_matrix_set_tables = []

        if self.has_tile_matrix_table:
            self.tile_matrix_tables = [row[0] for row in view.query(
                'SELECT DISTINCT table_name FROM gpkg_tile_matrix ORDER BY table_name')
                if view.table_exists(row[0])]
        else:
            self.tile_matrix_tables = []

    def tile_matrices(self, table_name):
        return self.view.query(
            'SELECT zoom_level, matrix_width, matrix_height, tile_width, tile_height,'
            ' pixel_x_size, pixel_y_size FROM gpkg_tile_matrix WHERE table_name = ?'
            ' ORDER BY zoom_level ASC', (table_name, ))


def _names(names):
    return set(n.lower() for n in names if n is not None)


def requirement_34(rule, ctx):
    contents = _names(ctx.contents_tiles_tables)
    return [
        rule.issue('The tile pyramid user data table %s is not referenced in %s.'
                   ' This table needs to be referenced in the %s table.' % (
                       table, CONTENTS_TABLE, CONTENTS_TABLE), table_name=table)
        for table in ctx.pyramid_tables if table.lower() not in contents
    ]


def requirement_35(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in ctx.pyramid_tables:
        matrices = ctx.tile_matrices(table)
        for current, next_ in zip(matrices, matrices[1:]):
            if current['zoom_level'] != next_['zoom_level'] - 1:
                continue
            if not (is_equal(current['pixel_x_size'] / 2.0, next_['pixel_x_size']) and
                    is_equal(current['pixel_y_size'] / 2.0, next_['pixel_y_size'])):
                issues.append(rule.issue(
                    'Pixel sizes of %s do not vary by a factor of 2 between zoom levels %d and %d:'
                    ' (%f, %f) -> (%f, %f)' % (
                        table, current['zoom_level'], next_['zoom_level'],
                        current['pixel_x_size'], current['pixel_y_size'],
                        next_['pixel_x_size'], next_['pixel_y_size']),
                    table_name=table))
    return issues


def requirement_36(rule, ctx):
    issues = []
    for table in ctx.pyramid_tables:
        invalid = []
        for row in ctx.view.iter_query('SELECT id, tile_data FROM %s ORDER BY id' % quote_identifier(table)):
            data = row['tile_data']
            if not isinstance(data, bytes) or decodable_format(data, ctx.tile_formats) is None:
                invalid.append(str(row['id']))
        if invalid:
            issues.append(rule.issue(
                'The tiles with the following ids in table %s are not in one of the formats %s: %s.' % (
                    table, ', '.join(ctx.tile_formats), ', '.join(invalid)),
                table_name=table))
    return issues


def _verify_metadata_table(rule, ctx, has_table, definition):
    if not ctx.pyramid_tables:
        return []
    if not has_table:
        return [rule.issue(
            'The GeoPackage does not contain a %s table. Every GeoPackage with a tile pyramid'
            ' user data table must also have a %s table.' % (definition.name, definition.name),
            table_name=definition.name)]
    return [rule.issue(msg, table_name=definition.name) for msg in definition.verify(ctx.view)]


def requirement_38(rule, ctx):
    return _verify_metadata_table(rule, ctx, ctx.has_tile_matrix_set_table, tile_matrix_set_definition)


def requirement_39(rule, ctx):
    if not ctx.has_tile_matrix_set_table:
        return []
    contents = _names(ctx.contents_tiles_tables)
    return [
        rule.issue('The table_name %s in %s does not reference a %s row with data_type "tiles".' % (
            table, TILE_MATRIX_SET_TABLE, CONTENTS_TABLE), table_name=table)
        for table in ctx.tile_matrix_set_tables if table.lower() not in contents
    ]


def requirement_40(rule, ctx):
    if not ctx.has_tile_matrix_set_table:
        return []
    matrix_sets = _names(ctx.tile_matrix_set_tables)
    return [
        rule.issue('The tile pyramid user data table %s is not referenced in %s.' % (
            table, TILE_MATRIX_SET_TABLE), table_name=table)
        for table in ctx.pyramid_tables if table.lower() not in matrix_sets
    ]


def _unknown_srs_ids(ctx, table_name):
    if not ctx.has_spatial_ref_sys_table:
        return [row[0] for row in ctx.view.query(
            'SELECT DISTINCT srs_id FROM %s ORDER BY srs_id' % table_name)]
    return [row[0] for row in ctx.view.query(
        'SELECT DISTINCT srs_id FROM %s WHERE srs_id IS NULL'
        ' OR srs_id NOT IN (SELECT srs_id FROM gpkg_spatial_ref_sys) ORDER BY srs_id' % table_name)]


def requirement_41(rule, ctx):
    if not ctx.has_tile_matrix_set_table:
        return []
    return [
        rule.issue('The %s table contains a reference to an srs_id that is not defined in the %s table.'
                   ' Unreferenced srs_id: %s' % (TILE_MATRIX_SET_TABLE, SPATIAL_REF_SYS_TABLE, srs_id))
        for srs_id in _unknown_srs_ids(ctx, TILE_MATRIX_SET_TABLE)
    ]


def requirement_42(rule, ctx):
    return _verify_metadata_table(rule, ctx, ctx.has_tile_matrix_table, tile_matrix_definition)


def requirement_43(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    contents = _names(ctx.contents_tiles_tables)
    tables = [row[0] for row in ctx.view.query(
        'SELECT DISTINCT table_name FROM gpkg_tile_matrix ORDER BY table_name')]
    return [
        rule.issue('The table_name %s in %s does not reference a %s row with data_type "tiles".' % (
            table, TILE_MATRIX_TABLE, CONTENTS_TABLE), table_name=table)
        for table in tables if table is None or table.lower() not in contents
    ]


def requirement_44(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in ctx.pyramid_tables:
        matrix_zooms = set(m['zoom_level'] for m in ctx.tile_matrices(table))
        tile_zooms = [row[0] for row in ctx.view.query(
            'SELECT DISTINCT zoom_level FROM %s ORDER BY zoom_level' % quote_identifier(table))]
        for zoom in tile_zooms:
            if zoom not in matrix_zooms:
                issues.append(rule.issue(
                    'The %s table does not contain a row for zoom level %s of the tile pyramid'
                    ' user data table %s.' % (TILE_MATRIX_TABLE, zoom, table), table_name=table))
    return issues


def minimum_value_check(column, minimum, inclusive):
    """
    Create a check for the minimum value of `column` across the whole
    tile matrix table.
    """
    def check(rule, ctx):
        if not ctx.has_tile_matrix_table:
            return []
        value = ctx.view.query_value('SELECT min(%s) FROM gpkg_tile_matrix' % column)
        if value is None:
            return []
        valid = value >= minimum if inclusive else value > minimum
        if valid:
            return []
        return [rule.issue('The %s in %s must be %s %s. Invalid %s: %s' % (
            column, TILE_MATRIX_TABLE, 'at least' if inclusive else 'greater than', minimum,
            column, value), table_name=TILE_MATRIX_TABLE)]
    check.__name__ = 'minimum_%s' % column
    return check


def requirement_52(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in ctx.pyramid_tables:
        matrices = ctx.tile_matrices(table)
        for current, next_ in zip(matrices, matrices[1:]):
            if not (current['pixel_x_size'] > next_['pixel_x_size'] and
                    current['pixel_y_size'] > next_['pixel_y_size']):
                issues.append(rule.issue(
                    'Pixel sizes of %s do not decrease from zoom level %d to %d. Invalid pixel_x_size: %s,'
                    ' invalid pixel_y_size: %s' % (
                        table, current['zoom_level'], next_['zoom_level'],
                        next_['pixel_x_size'], next_['pixel_y_size']),
                    table_name=table))
    return issues


def requirement_53(rule, ctx):
    issues = []
    for table in ctx.contents_tiles_tables:
        if not ctx.view.table_exists(table):
            issues.append(rule.issue(
                'The tiles table %s does not exist even though it is defined in the %s table.' % (
                    table, CONTENTS_TABLE), table_name=table))
            continue
        issues.extend(rule.issue(msg, table_name=table)
                      for msg in tile_pyramid_definition(table).verify(ctx.view))

    if ctx.has_tile_matrix_set_table:
        matrix_sets = _names(ctx.tile_matrix_set_tables)
        for table in ctx.contents_tiles_tables:
            if table.lower() not in matrix_sets:
                issues.append(rule.issue(
                    'The tiles table %s does not have a record in %s.' % (table, TILE_MATRIX_SET_TABLE),
                    table_name=table))
    return issues


def _matrix_pyramid_tables(ctx):
    pyramids = _names(ctx.pyramid_tables)
    return [t for t in ctx.tile_matrix_tables if t.lower() in pyramids]


def requirement_54(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in _matrix_pyramid_tables(ctx):
        row = ctx.view.query_one(
            'SELECT min(zoom_level), max(zoom_level) FROM gpkg_tile_matrix WHERE table_name = ?', (table, ))
        min_zoom, max_zoom = row[0], row[1]
        outside = [r[0] for r in ctx.view.query(
            'SELECT DISTINCT zoom_level FROM %s WHERE zoom_level < ? OR zoom_level > ? ORDER BY zoom_level'
            % quote_identifier(table), (min_zoom, max_zoom))]
        if outside:
            issues.append(rule.issue(
                'The tile pyramid user data table %s contains zoom levels outside of the range [%d, %d]'
                ' defined in %s: %s' % (
                    table, min_zoom, max_zoom, TILE_MATRIX_TABLE, ', '.join(str(z) for z in outside)),
                table_name=table))
    return issues


def _tile_range_check(column, dimension):
    def check(rule, ctx):
        if not ctx.has_tile_matrix_table:
            return []
        issues = []
        for table in _matrix_pyramid_tables(ctx):
            invalid = []
            for matrix in ctx.tile_matrices(table):
                limit = matrix[dimension] - 1
                row = ctx.view.query_one(
                    'SELECT min(%s), max(%s) FROM %s WHERE zoom_level = ?' % (
                        column, column, quote_identifier(table)), (matrix['zoom_level'], ))
                if row[0] is None:
                    continue
                if row[0] < 0 or row[1] > limit:
                    invalid.append('zoom level %d has %s values outside of the range [0, %d]' % (
                        matrix['zoom_level'], column, limit))
            if invalid:
                issues.append(rule.issue(
                    'The table %s has tiles with %s values outside the range of their zoom level: %s' % (
                        table, column, '; '.join(invalid)),
                    table_name=table))
        return issues
    check.__name__ = 'range_%s' % column
    return check


def minimum_bounding_box_exact(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in ctx.pyramid_tables:
        quoted = quote_identifier(table)
        if ctx.view.query_one('SELECT 1 FROM %s LIMIT 1' % quoted) is None:
            continue
        missing = []
        if ctx.view.query_one('SELECT 1 FROM %s WHERE tile_column = 0 LIMIT 1' % quoted) is None:
            missing.append('minimum column (0)')
        if ctx.view.query_one('SELECT 1 FROM %s WHERE tile_row = 0 LIMIT 1' % quoted) is None:
            missing.append('minimum row (0)')
        if ctx.view.query_one(
                'SELECT 1 FROM gpkg_tile_matrix tm WHERE tm.table_name = ? AND EXISTS('
                ' SELECT 1 FROM %s WHERE tile_column = tm.matrix_width - 1'
                ' AND zoom_level = tm.zoom_level)' % quoted, (table, )) is None:
            missing.append('maximum column (matrix_width - 1)')
        if ctx.view.query_one(
                'SELECT 1 FROM gpkg_tile_matrix tm WHERE tm.table_name = ? AND EXISTS('
                ' SELECT 1 FROM %s WHERE tile_row = tm.matrix_height - 1'
                ' AND zoom_level = tm.zoom_level)' % quoted, (table, )) is None:
            missing.append('maximum row (matrix_height - 1)')
        if missing:
            issues.append(rule.issue(
                'There must be at least one tile in the minimum and maximum row and column of %s.'
                ' The table has no tile for %s at any zoom level, so its contents do not agree'
                ' with the minimum bounding box in %s.' % (table, ', '.join(missing), TILE_MATRIX_SET_TABLE),
                table_name=table))
    return issues


def pixel_size_matches_bounds(rule, ctx):
    if not (ctx.has_tile_matrix_table and ctx.has_tile_matrix_set_table):
        return []
    issues = []
    for table in ctx.pyramid_tables:
        bbox = ctx.view.query_one(
            'SELECT min_x, min_y, max_x, max_y FROM gpkg_tile_matrix_set WHERE table_name = ?', (table, ))
        if bbox is None:
            continue
        width = bbox['max_x'] - bbox['min_x']
        height = bbox['max_y'] - bbox['min_y']
        invalid = []
        for m in ctx.tile_matrices(table):
            if not (m['matrix_width'] and m['tile_width'] and m['matrix_height'] and m['tile_height']):
                continue
            expected_x = width / m['matrix_width'] / m['tile_width']
            expected_y = height / m['matrix_height'] / m['tile_height']
            if not (is_equal(m['pixel_x_size'], expected_x) and is_equal(m['pixel_y_size'], expected_y)):
                invalid.append('pixel_x_size %f, pixel_y_size %f at zoom level %d (expected %f, %f)' % (
                    m['pixel_x_size'], m['pixel_y_size'], m['zoom_level'], expected_x, expected_y))
        if invalid:
            issues.append(rule.issue(
                'The pixel sizes of %s should satisfy pixel_x_size = (max_x - min_x) / matrix_width /'
                ' tile_width and pixel_y_size = (max_y - min_y) / matrix_height / tile_height: %s' % (
                    table, '; '.join(invalid)),
                table_name=table))
    return issues


def tile_matrix_srs_reference(rule, ctx):
    if not ctx.has_tile_matrix_table:
        return []
    issues = []
    for table in ctx.tile_matrix_tables:
        srs_id = None
        if ctx.has_tile_matrix_set_table:
            srs_id = ctx.view.query_value(
                'SELECT srs_id FROM gpkg_tile_matrix_set WHERE table_name = ?', (table, ))
        if srs_id is None and ctx.has_contents_table:
            srs_id = ctx.view.query_value(
                'SELECT srs_id FROM gpkg_contents WHERE table_name = ?', (table, ))
        if srs_id is None:
            issues.append(rule.issue(
                'The tile matrices of %s do not reference a spatial reference system.' % table,
                table_name=table))
            continue
        exists = ctx.has_spatial_ref_sys_table and ctx.view.query_one(
            'SELECT 1 FROM gpkg_spatial_ref_sys WHERE srs_id = ?', (srs_id, )) is not None
        if not exists:
            issues.append(rule.issue(
                'The tile matrices of %s reference the srs_id %s, which is not defined in %s.' % (
                    table, srs_id, SPATIAL_REF_SYS_TABLE),
                table_name=table))
    return issues


def contents_srs_matches_tile_matrix_set(rule, ctx):
    if not (ctx.has_tile_matrix_set_table and ctx.has_contents_table):
        return []
    rows = ctx.view.query(
        "SELECT gc.table_name, gc.srs_id AS contents_srs_id, tms.srs_id AS matrix_set_srs_id"
        " FROM gpkg_contents gc JOIN gpkg_tile_matrix_set tms ON gc.table_name = tms.table_name"
        " WHERE gc.data_type = 'tiles' AND gc.srs_id IS NOT tms.srs_id ORDER BY gc.table_name")
    return [
        rule.issue('The srs_id %s of %s in %s does not match the srs_id %s in %s.' % (
            row['contents_srs_id'], row['table_name'], CONTENTS_TABLE,
            row['matrix_set_srs_id'], TILE_MATRIX_SET_TABLE), table_name=row['table_name'])
        for row in rows
    ]


_rules = [
    Rule('pyramid_tables_in_contents', 'Requirement 34',
         'The gpkg_contents table SHALL contain a row with a data_type column value of "tiles"'
         ' for each tile pyramid user data table or view.',
         Severity.WARNING, requirement_34),
    Rule('pixel_size_factor_two', 'Requirement 35',
         'By default, zoom level pixel sizes SHALL vary by a factor of 2 between adjacent zoom levels.',
         Severity.WARNING, requirement_35),
    Rule('tile_data_format', 'Requirement 36',
         'Tile data SHALL be stored in MIME type image/jpeg or image/png.',
         Severity.WARNING, requirement_36, full_only=True),
    Rule('tile_matrix_set_table', 'Requirement 38',
         'A GeoPackage that contains a tile pyramid user data table SHALL contain a'
         ' gpkg_tile_matrix_set table per its table definition.',
         Severity.ERROR, requirement_38),
    Rule('tile_matrix_set_contents_reference', 'Requirement 39',
         'Values of the gpkg_tile_matrix_set table_name column SHALL reference values in the'
         ' gpkg_contents table_name column for rows with a data type of "tiles".',
         Severity.WARNING, requirement_39),
    Rule('tile_matrix_set_row_per_table', 'Requirement 40',
         'The gpkg_tile_matrix_set table SHALL contain one row for each tile pyramid user data table.',
         Severity.ERROR, requirement_40),
    Rule('tile_matrix_set_srs_reference', 'Requirement 41',
         'Values of the gpkg_tile_matrix_set srs_id column SHALL reference values in the'
         ' gpkg_spatial_ref_sys srs_id column.',
         Severity.ERROR, requirement_41),
    Rule('tile_matrix_table', 'Requirement 42',
         'A GeoPackage that contains a tile pyramid user data table SHALL contain a'
         ' gpkg_tile_matrix table per its table definition.',
         Severity.ERROR, requirement_42),
    Rule('tile_matrix_contents_reference', 'Requirement 43',
         'Values of the gpkg_tile_matrix table_name column SHALL reference values in the'
         ' gpkg_contents table_name column for rows with a data_type of "tiles".',
         Severity.WARNING, requirement_43),
    Rule('tile_matrix_row_per_zoom', 'Requirement 44',
         'The gpkg_tile_matrix table SHALL contain one row for each zoom level that contains one'
         ' or more tiles in each tile pyramid user data table.',
         Severity.ERROR, requirement_44),
    Rule('zoom_level_non_negative', 'Requirement 45',
         'The zoom_level column value in a gpkg_tile_matrix table row SHALL not be negative.',
         Severity.ERROR, minimum_value_check('zoom_level', 0, inclusive=True)),
    Rule('matrix_width_positive', 'Requirement 46',
         'The matrix_width column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('matrix_width', 0, inclusive=False)),
    Rule('matrix_height_positive', 'Requirement 47',
         'The matrix_height column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('matrix_height', 0, inclusive=False)),
    Rule('tile_width_positive', 'Requirement 48',
         'The tile_width column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('tile_width', 0, inclusive=False)),
    Rule('tile_height_positive', 'Requirement 49',
         'The tile_height column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('tile_height', 0, inclusive=False)),
    Rule('pixel_x_size_positive', 'Requirement 50',
         'The pixel_x_size column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('pixel_x_size', 0, inclusive=False)),
    Rule('pixel_y_size_positive', 'Requirement 51',
         'The pixel_y_size column value in a gpkg_tile_matrix table row SHALL be greater than 0.',
         Severity.ERROR, minimum_value_check('pixel_y_size', 0, inclusive=False)),
    Rule('pixel_size_decreasing', 'Requirement 52',
         'The pixel_x_size and pixel_y_size values for zoom levels sorted in ascending order'
         ' SHALL be sorted in descending order.',
         Severity.WARNING, requirement_52),
    Rule('contents_tables_exist', 'Requirement 53',
         'Each tile matrix set SHALL be stored in a different tile pyramid user data table with'
         ' a unique name per its table definition.',
         Severity.ERROR, requirement_53),
    Rule('tile_zoom_in_range', 'Requirement 54',
         'The tile pyramid zoom_level values SHALL be in the range min(tm.zoom_level) to'
         ' max(tm.zoom_level).',
         Severity.ERROR, requirement_54),
    Rule('tile_column_in_range', 'Requirement 55',
         'The tile pyramid tile_column values SHALL be in the range 0 to tm.matrix_width - 1.',
         Severity.WARNING, _tile_range_check('tile_column', 'matrix_width')),
    Rule('tile_row_in_range', 'Requirement 56',
         'The tile pyramid tile_row values SHALL be in the range 0 to tm.matrix_height - 1.',
         Severity.WARNING, _tile_range_check('tile_row', 'matrix_height')),
    Rule('tile_matrix_srs_reference', 'Tile matrix spatial reference system',
         'The tile matrices of every tile pyramid SHALL reference a spatial reference system'
         ' defined in gpkg_spatial_ref_sys.',
         Severity.ERROR, tile_matrix_srs_reference),
    Rule('contents_srs_matches_tile_matrix_set', 'gpkg_contents srs_id',
         'When data_type is tiles, gpkg_contents.srs_id SHALL match gpkg_tile_matrix_set.srs_id.',
         Severity.ERROR, contents_srs_matches_tile_matrix_set),
    Rule('minimum_bounding_box_exact', 'Reference 2.2.6.1.1 Table 8',
         'The gpkg_tile_matrix_set table defines the minimum bounding box for all content in a'
         ' tile pyramid user data table.',
         Severity.WARNING, minimum_bounding_box_exact),
    Rule('pixel_size_matches_bounds', 'Reference 2.2.6.1.2 para 1',
         'The bounding box in gpkg_tile_matrix_set SHALL be exact so that pixel sizes can be'
         ' derived from the bounds, the matrix dimensions and the tile sizes.',
         Severity.WARNING, pixel_size_matches_bounds),
]

#: All tile rules by identifier.
registry = OrderedDict((rule.identifier, rule) for rule in _rules)


def get_rule(identifier):
    return registry[identifier]
