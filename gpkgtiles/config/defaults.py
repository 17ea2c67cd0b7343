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

verification = dict(
    # none, fast or full
    level = 'fast',
)

precision = dict(
    # decimal digits used to reconcile tile matrix bounds
    default = 7,
    degree = 7,
    metre = 2,
    # e.g. {'EPSG:3395': 3}
    overrides = {},
)

image = dict(
    tile_formats = ['png', 'jpeg'],
)

sqlite = dict(
    timeout = 30,
    journal_mode = None,
    synchronous = None,
)

log_conf = None
