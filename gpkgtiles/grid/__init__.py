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

from gpkgtiles.exception import PreconditionError


class GridError(Exception):
    pass


class OutOfBoundsError(GridError, PreconditionError):
    pass


ORIGIN_UL = 'ul'
ORIGIN_UR = 'ur'
ORIGIN_LL = 'll'
ORIGIN_LR = 'lr'

#: GeoPackage tile addresses start at the upper left corner.
GPKG_TILE_ORIGIN = ORIGIN_UL


def origin_from_string(origin):
    """
    >>> origin_from_string('NW')
    'ul'
    >>> origin_from_string(None)
    'ul'
    >>> origin_from_string('center')
    Traceback (most recent call last):
    ...
    ValueError: unknown origin value 'center'
    """
    if origin is None:
        origin = GPKG_TILE_ORIGIN
    elif origin.lower() in ('ll', 'sw'):
        origin = ORIGIN_LL
    elif origin.lower() in ('ul', 'nw'):
        origin = ORIGIN_UL
    elif origin.lower() in ('ur', 'ne'):
        origin = ORIGIN_UR
    elif origin.lower() in ('lr', 'se'):
        origin = ORIGIN_LR
    else:
        raise ValueError("unknown origin value '%s'" % origin)
    return origin


def origin_corner(bbox, origin):
    """
    Returns the point of `bbox` at the `origin` corner.

    >>> origin_corner((0, 0, 30, 50), ORIGIN_UL)
    (0, 50)
    >>> origin_corner((0, 0, 30, 50), ORIGIN_LR)
    (30, 0)
    """
    if origin == ORIGIN_UL:
        return bbox[0], bbox[3]
    if origin == ORIGIN_UR:
        return bbox[2], bbox[3]
    if origin == ORIGIN_LL:
        return bbox[0], bbox[1]
    if origin == ORIGIN_LR:
        return bbox[2], bbox[1]
    raise ValueError("unknown origin value '%s'" % origin)


def origin_directions(origin):
    """
    Direction of increasing columns and rows along the x and y axis.

    >>> origin_directions(ORIGIN_UL)
    (1, -1)
    """
    x_dir = 1 if origin in (ORIGIN_UL, ORIGIN_LL) else -1
    y_dir = -1 if origin in (ORIGIN_UL, ORIGIN_UR) else 1
    return x_dir, y_dir
