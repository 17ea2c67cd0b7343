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

import pytest

from gpkgtiles.geopackage import GeoPackage
from gpkgtiles.util.sqlite3 import StorageView


@pytest.fixture
def gpkg_file(tmp_path):
    return str(tmp_path / 'test.gpkg')


@pytest.fixture
def gpkg(gpkg_file):
    gpkg = GeoPackage(gpkg_file)
    yield gpkg
    gpkg.close()


@pytest.fixture
def view():
    view = StorageView.connect(':memory:')
    yield view
    view.close()


@pytest.fixture
def wgs84(gpkg):
    return gpkg.core.get_spatial_reference_system(4326)


@pytest.fixture
def tile_set(gpkg, wgs84):
    return gpkg.tiles.add_tile_set('world', 'world', 'test tiles', (-180, -90, 180, 90), wgs84)
