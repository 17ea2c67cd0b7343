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
Runs the tile rules selected by a verification level.
"""

import logging

from gpkgtiles.exception import ConformanceError
from gpkgtiles.image import TILE_FORMATS
from gpkgtiles.util.sqlite3 import sqlite3
from gpkgtiles.verify import Severity, VerificationIssue, VerificationLevel
from gpkgtiles.verify.rules import RuleContext, registry as default_registry

log = logging.getLogger(__name__)


class Verifier(object):
    """
    Verify the tile pyramids of one GeoPackage.

    ``NONE`` runs nothing, ``FAST`` every rule except those that decode
    each tile and ``FULL`` all rules. Rules that do not run are collected
    in :attr:`skipped` and never part of the returned issues.
    """
    def __init__(self, view, level=VerificationLevel.FAST, tile_formats=TILE_FORMATS,
                 registry=None, filename=None):
        self.view = view
        self.level = VerificationLevel.from_string(level)
        self.tile_formats = tile_formats
        self.registry = default_registry if registry is None else registry
        self.filename = filename
        self.issues = []
        self.skipped = []

    def _selected_rules(self):
        for rule in self.registry.values():
            if rule.full_only and self.level is not VerificationLevel.FULL:
                self.skipped.append(rule.skipped(self.level))
                log.debug('skipping %s at level %s', rule.reference, self.level.value)
                continue
            yield rule

    def get_verification_issues(self):
        """
        Run all selected rules and return every issue found, without
        raising for errors.
        """
        self.issues = []
        self.skipped = []
        if self.level is VerificationLevel.NONE:
            return []

        try:
            context = RuleContext(self.view, tile_formats=self.tile_formats)
        except sqlite3.Error as ex:
            log.warning('unable to read tile metadata: %s', ex)
            self.issues = [VerificationIssue(
                'readable_metadata', 'GeoPackage', Severity.ERROR,
                'Unable to read the tile metadata: %s' % ex)]
            return list(self.issues)

        for rule in self._selected_rules():
            log.debug('verifying %s', rule.reference)
            self.issues.extend(rule.run(context))

        self._log_summary()
        return list(self.issues)

    def verify(self):
        """
        Run the verification. Raises :class:`~gpkgtiles.exception.ConformanceError`
        with all issues if at least one error was found, otherwise returns
        the (warning) issues.
        """
        issues = self.get_verification_issues()
        if any(issue.is_error for issue in issues):
            raise ConformanceError(issues, filename=self.filename)
        return issues

    def _log_summary(self):
        errors = sum(1 for i in self.issues if i.is_error)
        warnings = len(self.issues) - errors
        target = self.filename or 'GeoPackage'
        if errors:
            log.warning('%s: %d error(s), %d warning(s)', target, errors, warnings)
        elif warnings:
            log.info('%s: %d warning(s)', target, warnings)
        else:
            log.debug('%s: no issues', target)
        for issue in self.issues:
            log.debug('%s', issue)


def verify(view, level=VerificationLevel.FAST, tile_formats=TILE_FORMATS, filename=None):
    """
    Shortcut for ``Verifier(view, level).verify()``.
    """
    return Verifier(view, level, tile_formats=tile_formats, filename=filename).verify()
