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
Handle of one GeoPackage file.
"""

import logging
import os

from gpkgtiles.cache.geopackage import GeopackageTiles
from gpkgtiles.config.config import load_default_config
from gpkgtiles.core import GeoPackageCore
from gpkgtiles.exception import ConformanceError, PreconditionError
from gpkgtiles.util.fs import ensure_directory
from gpkgtiles.util.sqlite3 import StorageView, sqlite3
from gpkgtiles.verify import VerificationLevel
from gpkgtiles.verify.verifier import Verifier

log = logging.getLogger(__name__)

# "GP10" as big-endian integer
APPLICATION_ID = 0x47503130

OPEN_OR_CREATE = 'open_or_create'
OPEN = 'open'
CREATE = 'create'
OPEN_MODES = (OPEN_OR_CREATE, OPEN, CREATE)


class GeoPackage(object):
    """
    Open or create the GeoPackage `filename`.

    Unless `verification_level` is ``none``, the tile pyramids are
    verified after opening. Errors raise
    :class:`~gpkgtiles.exception.ConformanceError` (a file created by
    this call is removed again). Warnings are available as
    :attr:`verification_issues`.

    The handle is not thread-safe. Use one handle per thread.
    """
    def __init__(self, filename, verification_level=None, open_mode=OPEN_OR_CREATE, config=None):
        if open_mode not in OPEN_MODES:
            raise PreconditionError('unknown open mode %r, expected one of %s' % (
                open_mode, ', '.join(OPEN_MODES)))
        if config is None:
            config = load_default_config()
        self.config = config
        if verification_level is None:
            verification_level = config.verification.level
        self.verification_level = VerificationLevel.from_string(verification_level)
        self.filename = os.fspath(filename)
        self.verification_issues = []
        self.view = None

        exists = os.path.exists(self.filename)
        if open_mode == CREATE and exists:
            raise FileExistsError('GeoPackage %s already exists' % self.filename)
        if open_mode == OPEN and not exists:
            raise FileNotFoundError('GeoPackage %s does not exist' % self.filename)
        created = not exists

        if created:
            ensure_directory(self.filename)
        try:
            self._open(created)
            self._verify()
        except BaseException:
            self._close_connection()
            if created and os.path.exists(self.filename):
                log.info('removing new GeoPackage %s', self.filename)
                os.remove(self.filename)
            raise

    def _open(self, created):
        sqlite_conf = self.config.sqlite
        self.view = StorageView.connect(self.filename, timeout=sqlite_conf.timeout)
        self.view.pragma('foreign_keys', 1)
        if sqlite_conf.get('journal_mode'):
            self.view.pragma('journal_mode', sqlite_conf.journal_mode)
        if sqlite_conf.get('synchronous'):
            self.view.pragma('synchronous', sqlite_conf.synchronous)
        self.sqlite_version = sqlite3.sqlite_version

        self.core = GeoPackageCore(self.view)
        self.tiles = GeopackageTiles(self.view, self.core, self.config.precision)

        if created:
            log.info('creating GeoPackage %s', self.filename)
            with self.view.transaction():
                self.core.create_tables()
            self.view.pragma('application_id', APPLICATION_ID)
        elif self.get_application_id() != APPLICATION_ID:
            log.debug('%s has application_id %#x', self.filename, self.get_application_id())

    def _verify(self):
        if self.verification_level is VerificationLevel.NONE:
            return
        verifier = Verifier(self.view, self.verification_level,
                            tile_formats=tuple(self.config.image.tile_formats),
                            filename=self.filename)
        try:
            self.verification_issues = verifier.verify()
        except ConformanceError as ex:
            self.verification_issues = ex.issues
            log.warning('%s does not conform to the GeoPackage tiles requirements', self.filename)
            raise

    def get_verification_issues(self):
        return list(self.verification_issues)

    def get_application_id(self):
        return self.view.pragma('application_id')

    def _close_connection(self):
        if self.view is not None:
            self.view.close()
            self.view = None

    def close(self):
        """
        Close the file. Uncommitted changes are rolled back.
        """
        self._close_connection()

    @property
    def closed(self):
        return self.view is None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        return 'GeoPackage(%r)' % self.filename
