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
File system helpers.
"""

import os


def ensure_directory(file_name):
    """
    Create the directory of `file_name` if it does not exist, else do nothing.
    """
    dir_name = os.path.dirname(os.path.abspath(file_name))
    os.makedirs(dir_name, exist_ok=True)
