import struct
import zlib

import numpy as np
import pytest
from PIL import Image, PngImagePlugin  # noqa: F401  регистрирует PNG до подмены SAVE

from ninepatch import ARGB_BLACK

BLANK = 0x00000000


def _content(height, width):
    # уникальные не-маркерные значения с альфой 0x80
    rows, cols = np.indices((height, width), dtype=np.uint32)
    return np.uint32(0x80000000) + rows * 1000 + cols


@pytest.fixture
def make_nine_patch():
    """
    Собирает сетку height x width: рамка пустая, маркеры на top/side отрезках,
    содержимое уникальное, кроме областей, которые нужно сделать однородными.
    """
    def build(height=10, width=10, top=((2, 5),), side=((4, 5),), uniform_x=None, uniform_y=None):
        grid = _content(height, width)
        grid[0, :] = BLANK
        grid[:, 0] = BLANK
        if uniform_x is not None:
            start, end = uniform_x
            grid[1:, start + 1:end] = grid[1:, start:start + 1]
        if uniform_y is not None:
            start, end = uniform_y
            grid[start + 1:end, 1:] = grid[start:start + 1, 1:]
        for start, end in top:
            grid[0, start:end] = ARGB_BLACK
        for start, end in side:
            grid[start:end, 0] = ARGB_BLACK
        return grid
    return build



def _png_chunk(ctype, body):
    crc = zlib.crc32(ctype + body) & 0xFFFFFFFF
    return struct.pack(">I", len(body)) + ctype + body + struct.pack(">I", crc)


@pytest.fixture
def break_idat_chunk():
    """
    Режет IDAT пополам: первая половина остаётся IDAT, вторая уходит в чанк
    с невалидным типом. Файл открывается, но падает при декодировании.
    """
    def corrupt(path):
        data = path.read_bytes()
        out = [data[:8]]
        pos = 8
        while pos < len(data):
            length, = struct.unpack(">I", data[pos:pos + 4])
            ctype = data[pos + 4:pos + 8]
            body = data[pos + 8:pos + 8 + length]
            pos += 12 + length
            if ctype == b"IDAT":
                half = len(body) // 2
                out.append(_png_chunk(b"IDAT", body[:half]))
                out.append(_png_chunk(b"\x01\x02\x03\x04", body[half:]))
            else:
                out.append(_png_chunk(ctype, body))
        path.write_bytes(b"".join(out))
    return corrupt


@pytest.fixture
def failing_png_save(monkeypatch):
    """Подменяет PNG энкодер Pillow на такой, что пишет мусор и падает."""
    def save(im, fp, filename):
        fp.write(b"\x89PNG partial")
        raise OSError("disk full")
    monkeypatch.setitem(Image.SAVE, "PNG", save)
