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
Spatial reference system entries and CRS tagged coordinates.
"""

import logging

from pyproj import CRS
from pyproj.exceptions import CRSError

from gpkgtiles.exception import PreconditionError

log = logging.getLogger(__name__)


def get_authority(srs_code):
    """
    >>> get_authority('EPSG:4326')
    ('EPSG', 4326)
    >>> get_authority('none:-1')
    ('NONE', -1)
    >>> get_authority('4326')
    Traceback (most recent call last):
    ...
    gpkgtiles.exception.PreconditionError: invalid srs code '4326', expected AUTHORITY:ID
    """
    if isinstance(srs_code, str) and ':' in srs_code:
        auth_name, auth_id = srs_code.rsplit(':', 1)
        try:
            return auth_name.upper(), int(auth_id)
        except ValueError:
            pass
    raise PreconditionError("invalid srs code '%s', expected AUTHORITY:ID" % (srs_code, ))


class SpatialReferenceSystem(object):
    """
    One row of the ``gpkg_spatial_ref_sys`` catalog.

    `identifier` is the ``srs_id`` used by the tile tables,
    `organization` and `organization_srs_id` name the defining authority.
    """
    def __init__(self, name, identifier, organization, organization_srs_id, definition, description=None):
        if not name:
            raise PreconditionError('srs name may not be empty')
        if not organization:
            raise PreconditionError('srs organization may not be empty')
        if not definition:
            raise PreconditionError('srs definition may not be empty')
        self.name = name
        self.identifier = int(identifier)
        self.organization = organization
        self.organization_srs_id = int(organization_srs_id)
        self.definition = definition
        self.description = description

    @property
    def srs_code(self):
        return '%s:%d' % (self.organization.upper(), self.organization_srs_id)

    def matches(self, authority, identifier):
        """
        Returns ``True`` if this system is `authority`:`identifier`.
        The authority is compared case-insensitive.
        """
        return (self.organization.upper() == authority.upper() and
                self.organization_srs_id == int(identifier))

    def equals_fields(self, name, identifier, organization, organization_srs_id, definition):
        """
        Compare all fields except the optional description.
        """
        return (self.name == name and
                self.identifier == identifier and
                self.organization.upper() == organization.upper() and
                self.organization_srs_id == organization_srs_id and
                self.definition == definition)

    def __eq__(self, other):
        if not isinstance(other, SpatialReferenceSystem):
            return NotImplemented
        return (self.equals_fields(other.name, other.identifier, other.organization,
                                   other.organization_srs_id, other.definition) and
                self.description == other.description)

    def __hash__(self):
        return hash((self.identifier, self.organization.upper(), self.organization_srs_id))

    def __repr__(self):
        return 'SpatialReferenceSystem(%r, %d, %s)' % (self.name, self.identifier, self.srs_code)


class CrsCoordinate(object):
    """
    A point tagged with the reference system it is expressed in.

    >>> c = CrsCoordinate(8.5, 53.1, 'epsg', 4326)
    >>> c.srs_code
    'EPSG:4326'
    >>> c == CrsCoordinate(8.5, 53.1, 'EPSG', 4326)
    True
    """
    def __init__(self, x, y, authority, identifier):
        if not authority:
            raise PreconditionError('coordinate authority may not be empty')
        self.x = float(x)
        self.y = float(y)
        self.authority = authority
        self.identifier = int(identifier)

    @classmethod
    def from_srs_code(cls, x, y, srs_code):
        authority, identifier = get_authority(srs_code)
        return cls(x, y, authority, identifier)

    @property
    def srs_code(self):
        return '%s:%d' % (self.authority.upper(), self.identifier)

    def __eq__(self, other):
        if not isinstance(other, CrsCoordinate):
            return NotImplemented
        return (self.x == other.x and self.y == other.y and
                self.srs_code == other.srs_code)

    def __hash__(self):
        return hash((self.x, self.y, self.srs_code))

    def __repr__(self):
        return 'CrsCoordinate(%r, %r, %s)' % (self.x, self.y, self.srs_code)


_precision_cache = {}


def _axis_unit(srs):
    key = srs.srs_code
    if key not in _precision_cache:
        try:
            crs = CRS.from_authority(srs.organization.upper(), str(srs.organization_srs_id))
        except CRSError as ex:
            log.debug('unable to resolve %s: %s', key, ex)
            _precision_cache[key] = None
        else:
            if crs.axis_info:
                _precision_cache[key] = crs.axis_info[0].unit_name
            else:
                _precision_cache[key] = None
    return _precision_cache[key]


def precision_for_srs(srs, precision_conf):
    """
    Number of decimal digits used to reconcile bounds in `srs`.

    `precision_conf` is the ``precision`` section of the configuration.
    Explicit overrides take preference, then the unit of the first axis
    decides (degree or metre). Systems unknown to PROJ, like the undefined
    ``NONE`` entries, use the default.
    """
    overrides = precision_conf.get('overrides') or {}
    if srs.srs_code in overrides:
        return int(overrides[srs.srs_code])

    unit = _axis_unit(srs)
    if unit is None:
        return int(precision_conf['default'])
    if unit.lower() in ('degree', 'degrees'):
        return int(precision_conf['degree'])
    return int(precision_conf['metre'])
