#!/usr/bin/env python3
"""
ninepatch.py — схлопывание растягиваемой области nine-patch картинок.

Чёрные пиксели в верхней строке и левом столбце задают растягиваемую область.
Если внутри области все столбцы (или строки) одинаковые, её можно заменить
одним столбцом (строкой): при растягивании картинка будет выглядеть так же.

Сетка пикселей — 2D numpy массив uint32 с упакованными ARGB значениями.
Все функции возвращают новые массивы, входной массив не меняется.
"""
import sys
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

ARGB_BLACK = 0xFF000000

Span = Tuple[int, int]


class NoScalableRegionError(ValueError):
    pass


def _print_warning(message: str) -> None:
    print(message, file=sys.stderr)


@dataclass(frozen=True)
class CollapseResult:
    """Результат прохода.

    Fields:
        pixels: Итоговая сетка (height x width).
        width: Новая ширина, px.
        height: Новая высота, px.
        x_collapsed: На сколько столбцов уменьшилась ширина.
        y_collapsed: На сколько строк уменьшилась высота.
    """
    pixels: np.ndarray
    width: int
    height: int
    x_collapsed: int = 0
    y_collapsed: int = 0

    @property
    def changed(self) -> bool:
        return self.x_collapsed > 0 or self.y_collapsed > 0


def _check_grid(pixels: np.ndarray) -> np.ndarray:
    arr = np.asarray(pixels, dtype=np.uint32)
    if arr.ndim != 2:
        raise ValueError(f"Ожидается 2D сетка пикселей, получено ndim={arr.ndim}")
    if arr.size == 0:
        raise ValueError("Пустая сетка пикселей")
    return arr


# region locator
def locate_span(line: np.ndarray, marker: int = ARGB_BLACK) -> Span:
    """
    Ищет первый отрезок маркерных пикселей в строке/столбце рамки.
    Возвращает полуинтервал [start, end). Если маркера нет — NoScalableRegionError.
    """
    length = len(line)
    start = 0
    while start < length and line[start] != marker:
        start += 1
    if start == length:
        raise NoScalableRegionError("No scalable region found")

    end = start + 1
    while end < length and line[end] == marker:
        end += 1
    return start, end


def top_span(pixels: np.ndarray, marker: int = ARGB_BLACK) -> Span:
    return locate_span(pixels[0, :], marker)


def side_span(pixels: np.ndarray, marker: int = ARGB_BLACK) -> Span:
    return locate_span(pixels[:, 0], marker)


# multiplicity guard
def count_regions(line: np.ndarray, marker: int = ARGB_BLACK) -> int:
    """Сколько раздельных отрезков маркера в строке (0, 1 или больше)."""
    regions = 0
    seen_top = False  # внутри отрезка маркера
    seen_end = False  # после отрезка встретился не-маркер
    for value in line:
        is_black = value == marker
        if is_black and not seen_top:
            seen_top = True
            regions = 1
            continue
        if not is_black and seen_top:
            seen_end = True
            continue
        if is_black and seen_end:
            regions += 1
            seen_end = False
    return regions


def has_multiple_scalable_regions(
    pixels: np.ndarray,
    marker: int = ARGB_BLACK,
    warn: Callable[[str], None] = _print_warning,
) -> bool:
    """
    Проходит по верхней строке и левому столбцу и проверяет, что на каждой
    оси ровно один непрерывный отрезок маркера.

    Отсутствие отрезка только репортится и не мешает другой оси.
    """
    multiple = False
    for name, line in (("top", pixels[0, :]), ("side", pixels[:, 0])):
        regions = count_regions(line, marker)
        if regions == 0:
            warn(f"No scalable region found on {name}...")
        elif regions > 1:
            warn(f"Multiple scalable regions found on {name}: ignoring!")
            multiple = True
    return multiple


# uniformity checker
def column_range_matches(pixels: np.ndarray, start: int, end: int) -> bool:
    """Все столбцы [start, end) совпадают со столбцом start в каждой строке."""
    if end <= start + 1:
        return True
    return bool(np.all(pixels[:, start:end] == pixels[:, start:start + 1]))


def row_range_matches(pixels: np.ndarray, start: int, end: int) -> bool:
    """Все строки [start, end) совпадают со строкой start в каждом столбце."""
    if end <= start + 1:
        return True
    return bool(np.all(pixels[start:end, :] == pixels[start:start + 1, :]))


# collapser
def collapse_column_range(pixels: np.ndarray, start: int, end: int) -> np.ndarray:
    """Схлопывает столбцы [start, end) в один столбец start."""
    return np.delete(pixels, np.s_[start + 1:end], axis=1)


def collapse_row_range(pixels: np.ndarray, start: int, end: int) -> np.ndarray:
    """Схлопывает строки [start, end) в одну строку start."""
    return np.delete(pixels, np.s_[start + 1:end], axis=0)


def expand_span(pixels: np.ndarray, start: int, length: int, axis: int) -> np.ndarray:
    """
    Обратная операция к схлопыванию: размножает пиксель start вдоль оси axis
    до length штук. Нужна для проверки, что схлопывание ничего не потеряло.
    """
    if length < 1:
        raise ValueError("length должен быть >= 1")
    pixels = np.asarray(pixels)
    representative = np.take(pixels, [start], axis=axis)
    # при length == 1 copies пустой и сетка возвращается как есть
    copies = np.repeat(representative, length - 1, axis=axis)
    return np.concatenate([
        np.take(pixels, np.arange(0, start + 1), axis=axis),
        copies,
        np.take(pixels, np.arange(start + 1, pixels.shape[axis]), axis=axis),
    ], axis=axis)


# pipeline
def optimise_pixels(
    pixels: np.ndarray,
    marker: int = ARGB_BLACK,
    warn: Callable[[str], None] = _print_warning,
) -> Optional[CollapseResult]:
    """
    Прогоняет оптимизацию по обеим осям.

    Args:
        pixels: Сетка ARGB (height x width), не изменяется.
        marker: Значение маркерного пикселя рамки.
        warn: Куда писать диагностику.

    Returns:
        `CollapseResult` (возможно без изменений) или None, если на какой-то оси
        несколько растягиваемых областей и трогать картинку нельзя.
    """
    pixels = _check_grid(pixels)
    if has_multiple_scalable_regions(pixels, marker, warn):
        return None

    # Обе области ищем по исходной рамке: схлопывание не трогает индекс 0,
    # так что строка 0 и столбец 0 остаются в тех же координатах.
    try:
        top = top_span(pixels, marker)
    except NoScalableRegionError:
        top = None  # уже сообщили в has_multiple_scalable_regions
    try:
        side = side_span(pixels, marker)
    except NoScalableRegionError:
        side = None

    result = pixels.copy()
    x_collapsed = 0
    if top is not None and top[1] != top[0] + 1:
        start, end = top
        if column_range_matches(result, start, end):
            result = collapse_column_range(result, start, end)
            x_collapsed = end - start - 1
        else:
            warn("Column range doesn't match: ignoring!")

    y_collapsed = 0
    if side is not None and side[1] != side[0] + 1:
        start, end = side
        if row_range_matches(result, start, end):
            result = collapse_row_range(result, start, end)
            y_collapsed = end - start - 1
        else:
            warn("Row range doesn't match: ignoring!")

    height, width = result.shape
    return CollapseResult(
        pixels=result,
        width=width,
        height=height,
        x_collapsed=x_collapsed,
        y_collapsed=y_collapsed,
    )
