"""Чтение и запись картинок в виде сетки упакованных ARGB значений (uint32)."""
import os
import shutil
import struct
import tempfile
import zlib
from pathlib import Path

import numpy as np
from PIL import Image


def rgba_to_argb(arr: np.ndarray) -> np.ndarray:
    """(h, w, 4) uint8 RGBA -> (h, w) uint32 ARGB."""
    arr = arr.astype(np.uint32)
    r, g, b, a = arr[..., 0], arr[..., 1], arr[..., 2], arr[..., 3]
    return (a << 24) | (r << 16) | (g << 8) | b


def argb_to_rgba(grid: np.ndarray) -> np.ndarray:
    """(h, w) uint32 ARGB -> (h, w, 4) uint8 RGBA."""
    grid = np.asarray(grid, dtype=np.uint32)
    return np.stack([
        (grid >> 16) & 0xFF,
        (grid >> 8) & 0xFF,
        grid & 0xFF,
        (grid >> 24) & 0xFF,
    ], axis=-1).astype(np.uint8)


def load_pixels(path) -> np.ndarray:
    """
    Загружает картинку и возвращает сетку ARGB (height x width).
    Палитровые и RGB картинки приводятся к RGBA.

    Raises:
        FileNotFoundError: если файла нет.
        PIL.UnidentifiedImageError: если файл не картинка.
        OSError: если данные картинки битые.
    """
    with Image.open(path) as img:
        # Pillow декодирует лениво, битые чанки всплывают только здесь
        try:
            img.load()
        except (SyntaxError, EOFError, struct.error, zlib.error) as e:
            raise OSError(f"битый файл картинки: {e}") from e
        arr = np.array(img.convert("RGBA"))
    return rgba_to_argb(arr)


def write_pixels(grid: np.ndarray, path, compress_level: int = 9) -> None:
    """
    Сохраняет сетку ARGB как 32-битный RGBA PNG.
    Пишет во временный файл рядом и подменяет им path, так что при ошибке
    старый файл остаётся целым.
    """
    grid = np.asarray(grid, dtype=np.uint32)
    if grid.ndim != 2:
        raise ValueError(f"Ожидается 2D сетка пикселей, получено ndim={grid.ndim}")
    out = Image.fromarray(argb_to_rgba(grid))

    path = Path(path)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            out.save(f, format="PNG", compress_level=compress_level)
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
    except Exception:
        os.remove(tmp)
        raise
