#!/usr/bin/env python3
"""
shrink.py — оптимизация nine-patch картинок на месте.

Берёт список файлов, обрабатывает только те, что заканчиваются на суффикс
nine-patch (по умолчанию .9.png), и перезаписывает файл, если удалось схлопнуть
растягиваемую область.

Примеры:
  python shrink.py res/drawable/*.9.png
  NINEPATCH_CONFIG=ci.json python shrink.py button.9.png panel.9.png
"""
import argparse
import sys
from concurrent.futures import ProcessPoolExecutor

from ninepatch import optimise_pixels
from pixels import load_pixels, write_pixels
from utils import load_config


def shrink_nine_patch(path, marker=0xFF000000, compress_level=9):
    """
    Оптимизирует один файл.

    Returns:
        `CollapseResult`, если файл перезаписан, иначе None.
    """
    print(f"Processing {path}")
    pixels = load_pixels(path)

    result = optimise_pixels(pixels, marker=marker)
    if result is None or not result.changed:
        return None

    write_pixels(result.pixels, path, compress_level=compress_level)
    height, width = pixels.shape
    print(f"Shrunk {path}: {width}x{height} -> {result.width}x{result.height}")
    return result


def _process_one(path, config):
    try:
        shrink_nine_patch(path, marker=config['marker'], compress_level=config['compress_level'])
        return True
    except Exception as e:
        print(f"FAIL: {path} ({e})", file=sys.stderr)
        return False


def run(paths, config):
    """Обрабатывает список путей. Возвращает число файлов, на которых упало I/O."""
    targets = [p for p in paths if p.endswith(config['suffix'])]

    if config['jobs'] > 1 and len(targets) > 1:
        with ProcessPoolExecutor(max_workers=config['jobs']) as pool:
            ok = list(pool.map(_process_one, targets, [config] * len(targets)))
    else:
        ok = [_process_one(p, config) for p in targets]
    return ok.count(False)


def main(argv=None):
    ap = argparse.ArgumentParser(description='Схлопнуть однородные растягиваемые области nine-patch PNG на месте.')
    ap.add_argument('paths', nargs='*', help='файлы картинок; обрабатываются только *.9.png')
    args = ap.parse_args(argv)

    try:
        config = load_config()
    except (OSError, ValueError) as e:
        print(f"Ошибка конфига: {e}", file=sys.stderr)
        return 2

    failed = run(args.paths, config)
    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
