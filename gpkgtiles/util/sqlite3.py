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
Thin access layer over the standard ``sqlite3`` module.

:class:`StorageView` is handed to every component that reads or writes a
GeoPackage. It owns the connection and the transaction state.
"""

import datetime
import logging
import sqlite3
from contextlib import contextmanager

from dateutil.parser import isoparse

log = logging.getLogger(__name__)


def adapt_date_iso(val):
    """Adapt datetime.date to ISO 8601 date."""
    return val.isoformat()


def adapt_datetime_iso(val):
    """
    Adapt datetime.datetime to the GeoPackage timestamp format
    ``%Y-%m-%dT%H:%M:%fZ`` in UTC. Naive values are taken as UTC.

    >>> adapt_datetime_iso(datetime.datetime(2026, 1, 2, 3, 4, 5, 678900))
    '2026-01-02T03:04:05.678Z'
    """
    if val.tzinfo is not None:
        val = val.astimezone(datetime.timezone.utc)
    return val.strftime('%Y-%m-%dT%H:%M:%S.') + '%03dZ' % (val.microsecond // 1000)


def convert_date(val):
    """Convert ISO 8601 date to datetime.date object."""
    return datetime.date.fromisoformat(val.decode('utf-8'))


def convert_datetime(val):
    """
    Convert ISO 8601 timestamp to datetime.datetime object. Values that
    are not ISO 8601 are returned as string.
    """
    val = val.decode('utf-8')
    try:
        return isoparse(val)
    except ValueError:
        log.debug('unable to parse timestamp %r', val)
        return val


sqlite3.register_adapter(datetime.date, adapt_date_iso)
sqlite3.register_adapter(datetime.datetime, adapt_datetime_iso)
sqlite3.register_converter('date', convert_date)
sqlite3.register_converter('datetime', convert_datetime)


def quote_identifier(name):
    """
    >>> quote_identifier('tiles')
    '"tiles"'
    >>> quote_identifier('a"b')
    '"a""b"'
    """
    return '"%s"' % name.replace('"', '""')


class StorageView(object):
    """
    Query and transaction interface of one SQLite connection.

    The connection runs in autocommit mode. All writes must happen in a
    :meth:`transaction` block, which issues explicit ``BEGIN``,
    ``COMMIT`` and ``ROLLBACK`` statements so that schema changes are
    rolled back as well.
    """
    def __init__(self, connection):
        self.connection = connection
        self.connection.row_factory = sqlite3.Row
        self._transaction_depth = 0

    @classmethod
    def connect(cls, filename, timeout=30):
        conn = sqlite3.connect(filename, timeout=timeout, isolation_level=None,
                               detect_types=sqlite3.PARSE_DECLTYPES)
        return cls(conn)

    @property
    def in_transaction(self):
        return self._transaction_depth > 0

    @contextmanager
    def transaction(self):
        """
        Run the block atomically. Nested blocks join the outermost
        transaction. Any exception rolls back everything and is re-raised.
        """
        if self._transaction_depth:
            self._transaction_depth += 1
            try:
                yield self
            finally:
                self._transaction_depth -= 1
            return

        self.connection.execute('BEGIN')
        self._transaction_depth = 1
        try:
            yield self
        except BaseException:
            self._transaction_depth = 0
            log.debug('rolling back transaction')
            self.connection.execute('ROLLBACK')
            raise
        else:
            self._transaction_depth = 0
            self.connection.execute('COMMIT')

    def execute(self, sql, params=()):
        return self.connection.execute(sql, params)

    def executemany(self, sql, seq_of_params):
        return self.connection.executemany(sql, seq_of_params)

    def query(self, sql, params=()):
        return self.connection.execute(sql, params).fetchall()

    def iter_query(self, sql, params=()):
        cur = self.connection.execute(sql, params)
        try:
            for row in cur:
                yield row
        finally:
            cur.close()

    def query_one(self, sql, params=()):
        return self.connection.execute(sql, params).fetchone()

    def query_value(self, sql, params=(), default=None):
        row = self.query_one(sql, params)
        if row is None or row[0] is None:
            return default
        return row[0]

    def pragma(self, name, value=None):
        if value is None:
            return self.query_value('PRAGMA %s' % name)
        self.connection.execute('PRAGMA %s = %s' % (name, value))

    def table_exists(self, table_name):
        row = self.query_one(
            "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE",
            (table_name, ))
        return row is not None

    def table_names(self):
        return [row['name'] for row in self.query(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'")]

    def table_sql(self, table_name):
        return self.query_value(
            "SELECT sql FROM sqlite_master WHERE type = 'table' AND name = ? COLLATE NOCASE",
            (table_name, ))

    def table_info(self, table_name):
        return self.query('PRAGMA table_info(%s)' % quote_identifier(table_name))

    def foreign_key_list(self, table_name):
        return self.query('PRAGMA foreign_key_list(%s)' % quote_identifier(table_name))

    def index_list(self, table_name):
        return self.query('PRAGMA index_list(%s)' % quote_identifier(table_name))

    def index_info(self, index_name):
        return self.query('PRAGMA index_info(%s)' % quote_identifier(index_name))

    def close(self):
        if self.connection.in_transaction:
            log.debug('rolling back uncommitted changes on close')
            self.connection.rollback()
        self._transaction_depth = 0
        self.connection.close()
