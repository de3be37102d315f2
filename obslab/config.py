# obslab/config.py
"""
obslab.config
─────────────
Глобальные настройки разрешения целей.

Настройки живут в одном датаклассе :class:`TargetsConfig`; текущий экземпляр
можно

* прочитать из YAML (:func:`load_config`),
* установить глобально (:func:`set_config`),
* временно переопределить (:func:`config_context`).

Пример YAML::

    targets:
      check_nobs: true
      log_strategy: false
      strict_obsdim: false

Ключ верхнего уровня ``targets`` необязателен – допускается и «плоский» файл.
"""

from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Iterator

import yaml

__all__ = [
    "TargetsConfig",
    "load_config",
    "get_config",
    "set_config",
    "config_context",
]


@dataclass(frozen=True)
class TargetsConfig:
    """
    Параметры
    ---------
    check_nobs : bool, default True
        Проверять, что все части композита содержат одинаковое число наблюдений.
    log_strategy : bool, default True
        Писать в DEBUG-лог выбранную стратегию разрешения целей.
    strict_obsdim : bool, default False
        Для контейнеров без осей (list, range, …) отвергать ``Constant(n)``
        вместо того, чтобы молча его игнорировать.
    """

    check_nobs: bool = True
    log_strategy: bool = True
    strict_obsdim: bool = False


_CURRENT = TargetsConfig()


def get_config() -> TargetsConfig:
    return _CURRENT


def set_config(cfg: TargetsConfig) -> TargetsConfig:
    """Установить *cfg* как текущую конфигурацию; возвращает предыдущую."""
    global _CURRENT
    if not isinstance(cfg, TargetsConfig):
        raise TypeError(f"ожидался TargetsConfig, получено {type(cfg).__name__}")
    prev, _CURRENT = _CURRENT, cfg
    return prev


@contextlib.contextmanager
def config_context(**overrides) -> Iterator[TargetsConfig]:
    """
    Временно переопределить отдельные поля::

        with config_context(check_nobs=False):
            resolve_targets((X, Y))
    """
    prev = set_config(replace(_CURRENT, **overrides))
    try:
        yield _CURRENT
    finally:
        set_config(prev)


def load_config(path: str | os.PathLike) -> TargetsConfig:
    """Прочитать :class:`TargetsConfig` из YAML-файла."""
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{path}: ожидался словарь верхнего уровня")
    section = data.get("targets", data)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError(f"{path}: секция targets должна быть словарём")

    known = {f.name for f in fields(TargetsConfig)}
    unknown = set(section) - known
    if unknown:
        raise ValueError(f"{path}: неизвестные ключи {sorted(unknown)}; допустимо {sorted(known)}")

    not_bool = {k: v for k, v in section.items() if not isinstance(v, bool)}
    if not_bool:
        raise ValueError(f"{path}: ожидались значения true/false, получено {not_bool}")

    return TargetsConfig(**section)
