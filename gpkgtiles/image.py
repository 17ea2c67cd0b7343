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
Image format detection for tile payloads.
"""

import logging
from io import BytesIO

from PIL import Image

log = logging.getLogger(__name__)

#: Tile encodings permitted in tile pyramid tables.
TILE_FORMATS = ('png', 'jpeg')

magic_bytes = [
    ('png', (b"\211PNG\r\n\032\n",)),
    ('jpeg', (b"\xFF\xD8",)),
    ('tiff', (b"MM\x00\x2a", b"II\x2a\x00",)),
    ('gif', (b"GIF87a", b"GIF89a",)),
    ('webp', (b"RIFF",)),
]


def peek_image_format(buf):
    """
    Guess the format of `buf` (bytes or seekable file object) from the
    first bytes.

    >>> peek_image_format(b'GIF89a...')
    'gif'
    >>> peek_image_format(b'foo') is None
    True
    """
    if isinstance(buf, (bytes, bytearray, memoryview)):
        header = bytes(buf[:12])
    else:
        buf.seek(0)
        header = buf.read(12)
        buf.seek(0)
    for format, bytes_ in magic_bytes:
        if header.startswith(bytes_):
            if format == 'webp' and header[8:12] != b'WEBP':
                continue
            return format
    return None


def can_decode(data, format):
    """
    Returns ``True`` if `data` is a complete image in `format`
    (``png`` or ``jpeg``) that Pillow is able to decode.
    """
    if not data or peek_image_format(data) != format:
        return False
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as ex:
        log.debug('unable to decode %s image: %s', format, ex)
        return False
    return (img.format or '').lower() == format


def decodable_format(data, formats=TILE_FORMATS):
    """
    Returns the first of `formats` that `data` decodes as, or ``None``.
    """
    for format in formats:
        if can_decode(data, format):
            return format
    return None
