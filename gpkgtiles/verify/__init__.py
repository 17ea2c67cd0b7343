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
Conformance verification of tile pyramids.
"""

import enum

from gpkgtiles.exception import PreconditionError


class Severity(enum.Enum):
    #: A mandatory requirement is violated.
    ERROR = 'Error'
    #: A recommendation or default behaviour is violated.
    WARNING = 'Warning'
    #: The rule was not run at the active verification level.
    SKIPPED = 'Skipped'

    def __str__(self):
        return self.value


class VerificationLevel(enum.Enum):
    NONE = 'none'
    FAST = 'fast'
    FULL = 'full'

    @classmethod
    def from_string(cls, level):
        """
        >>> VerificationLevel.from_string('Full')
        <VerificationLevel.FULL: 'full'>
        """
        if isinstance(level, cls):
            return level
        try:
            return cls(str(level).lower())
        except ValueError:
            raise PreconditionError("unknown verification level '%s', expected none, fast or full" % (level, ))


class VerificationIssue(object):
    """
    A violated requirement. `rule` is the identifier of the rule that
    found it, `reference` the requirement it belongs to.
    """
    def __init__(self, rule, reference, severity, message, table_name=None):
        self.rule = rule
        self.reference = reference
        self.severity = severity
        self.message = message
        self.table_name = table_name

    @property
    def is_error(self):
        return self.severity is Severity.ERROR

    def __eq__(self, other):
        if not isinstance(other, VerificationIssue):
            return NotImplemented
        return (self.rule, self.reference, self.severity, self.message, self.table_name) == (
            other.rule, other.reference, other.severity, other.message, other.table_name)

    def __hash__(self):
        return hash((self.rule, self.severity, self.message))

    def __repr__(self):
        return 'VerificationIssue(%r, %s, %r)' % (self.rule, self.severity, self.message)

    def __str__(self):
        return '[%s] %s: %s' % (str(self.severity).upper(), self.reference, self.message)
