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
Expected schemas of the tile tables and their comparison with the
schema SQLite reports for a file.
"""

import re
from collections import namedtuple

from gpkgtiles.util.sqlite3 import sqlite3

_whitespace_re = re.compile(r'\s+')


def _normalize_default(value):
    """
    >>> _normalize_default(" strftime ( '%Y' , 'now' ) ")
    "strftime('%Y','now')"
    >>> _normalize_default(None) is None
    True
    """
    if value is None:
        return None
    return _whitespace_re.sub('', value).replace('"', "'")


class ColumnDefinition(namedtuple('ColumnDefinition', 'type not_null primary_key unique default')):
    """
    Declared type and constraints of a column. Columns of a primary key
    count as unique.
    """
    __slots__ = ()

    def matches(self, actual):
        """
        Returns ``True`` if `actual` (read from the file) satisfies this
        required definition. NOT NULL is only compared if required.
        """
        if (self.type or '').upper() != (actual.type or '').upper():
            return False
        if self.not_null and not actual.not_null:
            return False
        if self.primary_key != actual.primary_key or self.unique != actual.unique:
            return False
        return _normalize_default(self.default) == _normalize_default(actual.default)

    def __str__(self):
        parts = [self.type]
        if self.not_null:
            parts.append('NOT NULL')
        if self.primary_key:
            parts.append('PRIMARY KEY')
        if self.unique:
            parts.append('UNIQUE')
        if self.default is not None:
            parts.append('DEFAULT %s' % self.default)
        return ' '.join(parts)


ForeignKeyDefinition = namedtuple('ForeignKeyDefinition', 'reference_table from_column to_column')


class TableDefinition(object):
    def __init__(self, name, columns, foreign_keys=(), group_uniques=()):
        self.name = name
        self.columns = columns
        self.foreign_keys = frozenset(
            ForeignKeyDefinition(t.lower(), f.lower(), to.lower()) for t, f, to in foreign_keys)
        self.group_uniques = [tuple(u) for u in group_uniques]

    def verify(self, view):
        """
        Compare the table in `view` against this definition. Returns a
        list of messages, empty if the table matches.
        """
        sql = view.table_sql(self.name)
        if sql is None:
            return ['The `sql` field must include the %s table SQL Definition.' % self.name]

        messages = []
        uniques = read_uniques(view, self.name)
        actual_columns = read_columns(view, self.name, uniques)
        for column_name, required in self.columns.items():
            actual = actual_columns.get(column_name.lower())
            if actual is None:
                messages.append('Required column: %s.%s is missing' % (self.name, column_name))
            elif not required.matches(actual):
                messages.append('Required column %s.%s is defined as: %s but should be: %s' % (
                    self.name, column_name, actual, required))

        foreign_keys = read_foreign_keys(view, self.name)
        for fk in sorted(self.foreign_keys):
            if fk not in foreign_keys:
                messages.append('The table %s is missing the foreign key constraint: %s.%s => %s.%s' % (
                    self.name, self.name, fk.from_column, fk.reference_table, fk.to_column))

        for group_unique in self.group_uniques:
            if frozenset(c.lower() for c in group_unique) not in uniques:
                messages.append('The table %s is missing the column group unique constraint: (%s)' % (
                    self.name, ', '.join(group_unique)))
        return messages

    def matches(self, view):
        try:
            return not self.verify(view)
        except sqlite3.Error:
            return False


def read_uniques(view, table_name):
    """
    Returns the column sets of all unique indices of `table_name`,
    including the indices SQLite creates for PRIMARY KEY and UNIQUE
    constraints.
    """
    uniques = set()
    for index in view.index_list(table_name):
        if not index['unique']:
            continue
        columns = [row['name'] for row in view.index_info(index['name'])]
        if columns and all(columns):
            uniques.add(frozenset(c.lower() for c in columns))
    return uniques


def read_columns(view, table_name, uniques):
    columns = {}
    for row in view.table_info(table_name):
        name = row['name'].lower()
        primary_key = bool(row['pk'])
        columns[name] = ColumnDefinition(
            type=row['type'],
            not_null=bool(row['notnull']),
            primary_key=primary_key,
            unique=primary_key or frozenset([name]) in uniques,
            default=row['dflt_value'],
        )
    return columns


def read_foreign_keys(view, table_name):
    return set(
        ForeignKeyDefinition(row['table'].lower(), row['from'].lower(), (row['to'] or '').lower())
        for row in view.foreign_key_list(table_name))


TILE_MATRIX_SET_TABLE = 'gpkg_tile_matrix_set'
TILE_MATRIX_TABLE = 'gpkg_tile_matrix'
CONTENTS_TABLE = 'gpkg_contents'
SPATIAL_REF_SYS_TABLE = 'gpkg_spatial_ref_sys'

tile_matrix_set_definition = TableDefinition(
    TILE_MATRIX_SET_TABLE,
    {
        'table_name': ColumnDefinition('TEXT', True, True, True, None),
        'srs_id': ColumnDefinition('INTEGER', True, False, False, None),
        'min_x': ColumnDefinition('DOUBLE', True, False, False, None),
        'min_y': ColumnDefinition('DOUBLE', True, False, False, None),
        'max_x': ColumnDefinition('DOUBLE', True, False, False, None),
        'max_y': ColumnDefinition('DOUBLE', True, False, False, None),
    },
    foreign_keys=[
        (SPATIAL_REF_SYS_TABLE, 'srs_id', 'srs_id'),
        (CONTENTS_TABLE, 'table_name', 'table_name'),
    ],
)

tile_matrix_definition = TableDefinition(
    TILE_MATRIX_TABLE,
    {
        'table_name': ColumnDefinition('TEXT', True, True, True, None),
        'zoom_level': ColumnDefinition('INTEGER', True, True, True, None),
        'matrix_width': ColumnDefinition('INTEGER', True, False, False, None),
        'matrix_height': ColumnDefinition('INTEGER', True, False, False, None),
        'tile_width': ColumnDefinition('INTEGER', True, False, False, None),
        'tile_height': ColumnDefinition('INTEGER', True, False, False, None),
        'pixel_x_size': ColumnDefinition('DOUBLE', True, False, False, None),
        'pixel_y_size': ColumnDefinition('DOUBLE', True, False, False, None),
    },
    foreign_keys=[
        (CONTENTS_TABLE, 'table_name', 'table_name'),
    ],
)


def tile_pyramid_definition(table_name):
    """
    Expected schema of the tile pyramid user data table `table_name`.
    """
    return TableDefinition(
        table_name,
        {
            'id': ColumnDefinition('INTEGER', False, True, True, None),
            'zoom_level': ColumnDefinition('INTEGER', True, False, False, None),
            'tile_column': ColumnDefinition('INTEGER', True, False, False, None),
            'tile_row': ColumnDefinition('INTEGER', True, False, False, None),
            'tile_data': ColumnDefinition('BLOB', True, False, False, None),
        },
        group_uniques=[('zoom_level', 'tile_column', 'tile_row')],
    )
