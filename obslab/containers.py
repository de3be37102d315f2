# obslab/containers.py
"""
Готовые контейнеры наблюдений
=============================
Модуль предоставляет простые контейнеры, работающие целиком в оперативной
памяти, и показывает, как контейнер подключает хуки целей.

Структура
---------
* **ObsContainer** – абстрактный контракт: ``nobs`` / ``getobs``.
* **RAMContainer** – «готовый список в RAM» (только чтение).
* **SyntheticContainer** – лениво или жадно генерирует наблюдения по функции
  *factory(idx)*; поддерживает кэширование (полное или LRU‑N).
* **TargetsMixin** – добавляет bulk‑ и single‑хуки поверх «дешёвых»
  метаданных целей, не трогая (возможно, дорогие) наблюдения.
* **LabeledRAMContainer**, **LabeledSyntheticContainer** – контейнеры с хуками.

Примеры использования
---------------------
```python
>>> from obslab import resolve_targets, iter_targets
>>> from obslab.containers import LabeledSyntheticContainer

# наблюдения «дорогие» (например, чтение изображений с диска),
# метки известны заранее
images = LabeledSyntheticContainer(
        length=10_000,
        factory=lambda i: load_image(i),   # вызывается только по требованию
        targets=labels,                    # list / np.ndarray / callable(i)
        cache=512,                         # LRU на 512 последних наблюдений
)
y = resolve_targets(images)               # load_image не вызывается ни разу
y_bin = resolve_targets(images, lambda im: im.mean() > 0.5)   # читает всё
```
"""

from __future__ import annotations

import abc
import logging
from collections import OrderedDict
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

import numpy as np

from obslab.access import getobs, normalize_index

__all__ = [
    "ObsContainer",
    "RAMContainer",
    "SyntheticContainer",
    "TargetsMixin",
    "LabeledRAMContainer",
    "LabeledSyntheticContainer",
]


# ────────────────────────────────────────────────────────────────────────────
#                             БАЗОВЫЙ КЛАСС
# ────────────────────────────────────────────────────────────────────────────
class ObsContainer(abc.ABC):
    """Минимальный контракт, который понимают nobs/getobs.

    Наследнику достаточно реализовать ``__len__`` и ``read(idx)``;
    ``obsdim`` у таких контейнеров одна естественная ось, тег игнорируется.
    """

    # --------- чтение
    @abc.abstractmethod
    def __len__(self) -> int: ...

    @abc.abstractmethod
    def read(self, idx: int) -> Any: ...

    # --------- контракт nobs / getobs
    def nobs(self, obsdim=None) -> int:  # noqa: D401
        return len(self)

    def getobs(self, idx=None, obsdim=None):
        if idx is None:
            return [self.read(i) for i in range(len(self))]
        idx = normalize_index(idx, len(self))
        if isinstance(idx, int):
            return self.read(idx)
        return [self.read(int(i)) for i in idx]


# ────────────────────────────────────────────────────────────────────────────
#                 RAMContainer – статический список в памяти
# ────────────────────────────────────────────────────────────────────────────
class RAMContainer(ObsContainer):
    """Контейнер для *уже готового* списка наблюдений, живущего в RAM."""

    def __init__(self, data: Iterable[Any] = ()):  # noqa: D401
        self._data: List[Any] = list(data)

    def __len__(self):  # noqa: D401
        return len(self._data)

    def read(self, idx: int) -> Any:
        if idx < 0:
            idx += len(self)
        return self._data[idx]


# ────────────────────────────────────────────────────────────────────────────
#           SyntheticContainer – лениво / жадно генерируемые данные
# ────────────────────────────────────────────────────────────────────────────
class SyntheticContainer(ObsContainer):
    """Контейнер, который генерирует наблюдения по функции *factory(idx)*.

    Параметры
    ---------
    length : int
        Сколько «виртуальных» наблюдений содержит контейнер.
    factory : Callable[[int], Any]
        Функция‑синтезатор: получает индекс *i* и возвращает наблюдение.
    cache : bool | int, default False
        * ``True``  → сгенерировать и хранить **все** наблюдения сразу.
        * ``int``   → LRU‑кэш последних *N* обращений.
        * ``False`` → не кешировать: каждый ``read(i)`` заново вызывает фабрику.
    logger : logging.Logger, optional
        По умолчанию ``logging.getLogger(<имя класса>)``.
    """

    def __init__(
        self,
        length: int,
        factory: Callable[[int], Any],
        *,
        cache: Union[bool, int] = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if length < 0:
            raise ValueError("length must be >= 0")
        self.length = int(length)
        self.factory = factory
        self.logger = logger or logging.getLogger(self.__class__.__name__)

        if cache is True:
            self._data: List[Any] = [factory(i) for i in range(self.length)]
            self._lru: Optional[OrderedDict] = None
        elif cache is False:
            self._data = []
            self._lru = None
        else:  # cache = int -> LRU‑N
            if int(cache) <= 0:
                raise ValueError("LRU cache size must be > 0")
            self._data = []
            self._lru = OrderedDict()
            self._max_lru = int(cache)

    def __len__(self):  # noqa: D401
        return self.length

    def read(self, idx: int) -> Any:  # noqa: D401
        if idx < 0:
            idx += self.length
        if not (0 <= idx < self.length):
            raise IndexError(idx)

        # --- полный кэш ------------------------------------------------
        if idx < len(self._data):
            return self._data[idx]

        # --- LRU‐кэш ---------------------------------------------------
        if self._lru is not None and idx in self._lru:
            self._lru.move_to_end(idx)
            return self._lru[idx]

        # --- генерируем -----------------------------------------------
        self.logger.debug("factory(%d)", idx)
        obs = self.factory(idx)

        if self._lru is not None:
            self._lru[idx] = obs
            while len(self._lru) > self._max_lru:
                self._lru.popitem(last=False)
        return obs


# ────────────────────────────────────────────────────────────────────────────
#                 TargetsMixin – цели из метаданных
# ────────────────────────────────────────────────────────────────────────────
class TargetsMixin:
    """Миксин: bulk‑ и single‑хуки целей поверх *self._targets*.

    ``_targets`` – либо последовательность (list / np.ndarray / tensor …) той же
    длины, что и контейнер, либо функция ``i -> target``.
    """

    _targets: Union[Sequence[Any], Callable[[int], Any]]

    def _init_targets(self, targets) -> None:
        if targets is None:
            raise ValueError(f"{self.__class__.__name__}: targets обязательны")
        if not callable(targets) and len(targets) != len(self):
            raise ValueError(
                f"{self.__class__.__name__}: len(targets)={len(targets)} ≠ nobs={len(self)}"
            )
        self._targets = targets

    # bulk‑хук: одним вызовом на весь набор индексов
    def gettargets(self, indices, obsdim=None):
        idx = normalize_index(np.fromiter(indices, dtype=np.int64), len(self))
        if callable(self._targets):
            return [self._targets(int(i)) for i in idx]
        return getobs(self._targets, idx)

    # single‑хук: цель одного наблюдения
    def gettarget(self, index, obsdim=None):
        i = normalize_index(index, len(self))
        if callable(self._targets):
            return self._targets(i)
        return getobs(self._targets, i)


class LabeledRAMContainer(TargetsMixin, RAMContainer):
    """RAMContainer + цели из метаданных."""

    def __init__(self, data: Iterable[Any], targets):
        RAMContainer.__init__(self, data)
        self._init_targets(targets)


class LabeledSyntheticContainer(TargetsMixin, SyntheticContainer):
    """SyntheticContainer + цели из метаданных."""

    def __init__(
        self,
        length: int,
        factory: Callable[[int], Any],
        targets,
        *,
        cache: Union[bool, int] = False,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        SyntheticContainer.__init__(self, length, factory, cache=cache, logger=logger)
        self._init_targets(targets)
