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

import math


def bbox_width(bbox):
    return bbox[2] - bbox[0]


def bbox_height(bbox):
    return bbox[3] - bbox[1]


def bbox_is_finite(bbox):
    """
    >>> bbox_is_finite((0, 0, 10, 10))
    True
    >>> bbox_is_finite((0, float('nan'), 10, 10))
    False
    """
    return all(math.isfinite(v) for v in bbox)


def bbox_contains_point(bbox, x, y):
    """
    Returns ``True`` if the point is inside `bbox`. Points on the
    border are inside.

    >>> bbox_contains_point((0, 0, 10, 10), 10, 0)
    True
    >>> bbox_contains_point((0, 0, 10, 10), 10.0000001, 5)
    False
    """
    return bbox[0] <= x <= bbox[2] and bbox[1] <= y <= bbox[3]


def round_bbox(bbox, precision):
    """
    Round `bbox` outwards to `precision` decimal digits. Minimums are
    rounded down, maximums up.

    >>> round_bbox((0.123456, -0.123456, 9.87654, 5.5), 2)
    (0.12, -0.13, 9.88, 5.5)
    >>> round_bbox((-20037508.342789244, -20037508.342789244,
    ...             20037508.342789244, 20037508.342789244), 2)
    (-20037508.35, -20037508.35, 20037508.35, 20037508.35)
    """
    d = 10 ** precision
    return (
        math.floor(bbox[0] * d) / d,
        math.floor(bbox[1] * d) / d,
        math.ceil(bbox[2] * d) / d,
        math.ceil(bbox[3] * d) / d,
    )
