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

import doctest
import importlib

import pytest

MODULES = [
    'gpkgtiles.grid',
    'gpkgtiles.grid.tile_grid',
    'gpkgtiles.image',
    'gpkgtiles.pyramid',
    'gpkgtiles.srs',
    'gpkgtiles.config.config',
    'gpkgtiles.util.bbox',
    'gpkgtiles.util.sqlite3',
    'gpkgtiles.verify',
    'gpkgtiles.verify.rules',
    'gpkgtiles.verify.table',
]


@pytest.mark.parametrize('module_name', MODULES)
def test_doctests(module_name):
    module = importlib.import_module(module_name)
    failures, tests = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
    assert tests > 0
    assert failures == 0
