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

from gpkgtiles.util.yaml import load_yaml, load_yaml_file, YAMLError


class TestLoadYAMLFile(object):

    def yaml_file(self, tmp_path, content):
        filename = tmp_path / 'test.yaml'
        filename.write_text(content)
        return str(filename)

    def test_load_yaml_file(self, tmp_path):
        f = self.yaml_file(tmp_path, "hello:\n - 1\n - 2")
        with open(f) as fp:
            doc = load_yaml_file(fp)
        assert doc == {"hello": [1, 2]}

    def test_load_yaml_file_filename(self, tmp_path):
        f = self.yaml_file(tmp_path, "hello:\n - 1\n - 2")
        assert isinstance(f, str)
        doc = load_yaml_file(f)
        assert doc == {"hello": [1, 2]}

    def test_load_yaml(self):
        doc = load_yaml("hello:\n - 1\n - 2")
        assert doc == {"hello": [1, 2]}

    def test_load_yaml_with_tabs(self, tmp_path):
        f = self.yaml_file(tmp_path, "hello:\n\t- world")
        with pytest.raises(YAMLError) as excinfo:
            load_yaml_file(f)
        assert "line 2" in str(excinfo.value)

    def test_load_empty(self):
        assert load_yaml("") == {}

    def test_load_non_dict(self):
        with pytest.raises(YAMLError):
            load_yaml("- 1\n- 2")
        with pytest.raises(YAMLError):
            load_yaml("hello")
