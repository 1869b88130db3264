from copy import deepcopy
import json
import os

CONFIG_NAME = 'ninepatch.json'
CONFIG_ENV = 'NINEPATCH_CONFIG'

DEFAULT_CONFIG = {
    'suffix': '.9.png',
    'marker': 0xFF000000,
    'jobs': 1,
    'compress_level': 9,
}


def deep_merge(a, b):
    """
    Глубокий merge двух dict.

    Правила:
      - dict+dict: слияние по ключам, значения рекурсивно.
      - иначе побеждает b.
    Аргументы не изменяются.
    """
    if a is None:
        return deepcopy(b)
    if b is None:
        return deepcopy(a)

    if isinstance(a, dict) and isinstance(b, dict):
        out = {k: deepcopy(v) for k, v in a.items()}
        for k, v in b.items():
            if k in out:
                out[k] = deep_merge(out[k], v)
            else:
                out[k] = deepcopy(v)
        return out

    return deepcopy(b)


def read_json(path):
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def read_config_chain(path, _seen=None):
    """Читает конфиг, подмешивая снизу файл из ключа "parent" (путь относительно конфига)."""
    seen = _seen or set()
    real = os.path.realpath(path)
    if real in seen:
        raise ValueError(f"Циклический parent в конфиге: {path}")
    seen.add(real)

    config = read_json(path)
    if not isinstance(config, dict):
        raise ValueError(f"{path}: конфиг должен быть JSON объектом")

    parent = config.pop('parent', None)
    if parent:
        parent_path = os.path.join(os.path.dirname(path), parent)
        config = deep_merge(read_config_chain(parent_path, seen), config)
    return config


def _parse_marker(value):
    if isinstance(value, bool):
        raise ValueError(f"marker: ожидается число или hex строка, получено {value!r}")
    if isinstance(value, str):
        value = int(value, 16) if value.lower().startswith('0x') else int(value)
    if not isinstance(value, int) or not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"marker: ожидается 32-битное ARGB значение, получено {value!r}")
    return value


def validate_config(config):
    config = dict(config)
    config['marker'] = _parse_marker(config['marker'])

    suffix = config['suffix']
    if not isinstance(suffix, str) or not suffix:
        raise ValueError(f"suffix: ожидается непустая строка, получено {suffix!r}")

    jobs = config['jobs']
    if isinstance(jobs, bool) or not isinstance(jobs, int) or jobs < 1:
        raise ValueError(f"jobs: ожидается целое >= 1, получено {jobs!r}")

    level = config['compress_level']
    if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= 9:
        raise ValueError(f"compress_level: ожидается целое 0..9, получено {level!r}")
    return config


def load_config(path=None):
    """
    Дефолты + ninepatch.json из текущей папки (или файл из $NINEPATCH_CONFIG).
    Отсутствующий файл — не ошибка, просто берём дефолты.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV)
    if path is None:
        if not os.path.exists(CONFIG_NAME):
            return validate_config(DEFAULT_CONFIG)
        path = CONFIG_NAME
    return validate_config(deep_merge(DEFAULT_CONFIG, read_config_chain(path)))
