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
Error kinds raised by gpkgtiles.

Storage errors are not wrapped: failures of the SQLite layer propagate as
``sqlite3.Error`` subclasses after the enclosing transaction was rolled back.
"""


class PreconditionError(ValueError):
    """
    Invalid caller input. Raised before anything is written to the file.
    """
    pass


class ConfigurationError(Exception):
    pass


class ConformanceError(Exception):
    """
    A GeoPackage violates at least one mandatory requirement.

    ``issues`` contains every issue of the verification run, including
    warnings.
    """
    def __init__(self, issues, filename=None):
        self.issues = list(issues)
        self.filename = filename
        Exception.__init__(self, self._message())

    @property
    def errors(self):
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self):
        return [i for i in self.issues if not i.is_error]

    def _message(self):
        target = self.filename or 'GeoPackage'
        lines = ['%s failed verification with %d error(s) and %d warning(s):' % (
            target, len(self.errors), len(self.warnings))]
        for issue in self.issues:
            lines.append('  %s' % issue)
        return '\n'.join(lines)
