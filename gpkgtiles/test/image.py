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

from io import BytesIO

from PIL import Image, ImageDraw

from gpkgtiles.image import peek_image_format


def create_image(size, color=None, mode='RGB'):
    if color is None:
        img = Image.new(mode, size, color='white')
        draw = ImageDraw.Draw(img)
        draw.rectangle((0, 0, size[0] // 2, size[1] // 2), fill='black')
        return img
    if isinstance(color, str):
        return Image.new(mode, size, color=color)
    if len(color) == 4:
        mode = 'RGBA'
    return Image.new(mode, size, color=tuple(color))


def create_tmp_image_buf(size, format='png', color=None, mode='RGB'):
    img = create_image(size, color, mode)
    data = BytesIO()
    img.save(data, format)
    data.seek(0)
    return data


def create_tmp_image(size=(256, 256), format='png', color=None, mode='RGB'):
    """
    Returns `size` image encoded as `format`.
    """
    data = create_tmp_image_buf(size, format, color, mode)
    return data.read()


def check_format(data, format):
    assert peek_image_format(data) == format, 'expected %s image' % format
