# obslab/obsdim.py
"""
obslab.obsdim
─────────────
Теги «оси наблюдений» (observation dimension).

Для массивоподобных контейнеров (numpy, torch, …) не всегда очевидно,
вдоль какой оси лежат наблюдения: строки матрицы или её столбцы.
Тег отвечает на этот вопрос и **ничего не делает сам** – ядро только
передаёт его дальше в `nobs` / `getobs` и в пользовательские хуки.

Варианты
--------
* :class:`First`        – первая ось (``axis=0``);
* :class:`Last`         – последняя ось (``axis=-1``);
* :class:`Constant(n)`  – фиксированная ось *n* (допускаются отрицательные);
* :class:`Undefined`    – «не задано»: контейнер решает сам.

Для композитных контейнеров (tuple) допускается *кортеж* тегов –
по одному на каждую часть.

Пример::

    >>> as_obsdim("last")
    Last()
    >>> as_obsdim(1)
    Constant(dim=1)
    >>> as_obsdim(("first", None))
    (First(), Undefined())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple, Union

from obslab.errors import ObsDimError

__all__ = [
    "ObsDimension",
    "First",
    "Last",
    "Constant",
    "Undefined",
    "FIRST",
    "LAST",
    "UNDEFINED",
    "ObsDimLike",
    "as_obsdim",
]


# ────────────────────────────────────────────────────────────────────────────
#                                  ТЕГИ
# ────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class ObsDimension:
    """Базовый класс всех тегов оси наблюдений."""

    def __repr__(self) -> str:  # noqa: D401
        return f"{self.__class__.__name__}()"


@dataclass(frozen=True, repr=False)
class First(ObsDimension):
    """Наблюдения лежат вдоль первой оси."""


@dataclass(frozen=True, repr=False)
class Last(ObsDimension):
    """Наблюдения лежат вдоль последней оси."""


@dataclass(frozen=True)
class Constant(ObsDimension):
    """Наблюдения лежат вдоль оси с номером *dim*."""

    dim: int

    def __post_init__(self):
        # bool – подкласс int
        if isinstance(self.dim, bool) or not isinstance(self.dim, int):
            raise ObsDimError(f"Constant(dim): ожидался int, получено {self.dim!r}")

    def __repr__(self) -> str:  # noqa: D401
        return f"Constant(dim={self.dim})"


@dataclass(frozen=True, repr=False)
class Undefined(ObsDimension):
    """Ось не задана – контейнер использует своё умолчание."""


FIRST = First()
LAST = Last()
UNDEFINED = Undefined()

# то, что принимает публичный API
ObsDimLike = Union[None, str, int, ObsDimension, Tuple[Any, ...]]

_BY_NAME = {
    "first": FIRST,
    "last": LAST,
    "undefined": UNDEFINED,
}


# ────────────────────────────────────────────────────────────────────────────
#                              КОНВЕРТАЦИЯ
# ────────────────────────────────────────────────────────────────────────────
def as_obsdim(value: ObsDimLike):
    """
    Привести пользовательское значение к тегу (или кортежу тегов).

    * ``None``                        → ``Undefined()``
    * тег                             → он же
    * ``"first" | "last" | "undefined"`` (без учёта регистра) → тег
    * ``int``                         → ``Constant(int)``
    * ``tuple`` / ``list``            → кортеж тегов (для композитов)
    """
    if value is None:
        return UNDEFINED
    if isinstance(value, ObsDimension):
        return value
    if isinstance(value, str):
        tag = _BY_NAME.get(value.strip().lower())
        if tag is None:
            raise ObsDimError(
                f"Неизвестное имя оси наблюдений: {value!r}; "
                f"допустимо {sorted(_BY_NAME)}"
            )
        return tag
    if isinstance(value, bool):
        raise ObsDimError(f"bool не может задавать ось наблюдений: {value!r}")
    if isinstance(value, int):
        return Constant(value)
    if isinstance(value, (tuple, list)):
        # вложенные кортежи допустимы: композит внутри композита
        return tuple(as_obsdim(v) for v in value)
    raise ObsDimError(f"Не удаётся интерпретировать {value!r} как ось наблюдений")
