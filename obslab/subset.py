# obslab/subset.py
"""
obslab.subset
─────────────
Ленивые «виды» (views) контейнера по набору индексов.

* :class:`DataSubset` – контейнер-обёртка: хранит ссылку на исходные данные
  и массив индексов, ничего не копирует;
* :func:`datasubset` – фабрика; для композита возвращает кортеж видов
  (по одному на часть), так что соглашение «последний элемент = цели»
  сохраняется.

Хуки исходного контейнера (bulk / single) остаются доступны через вид –
см. :mod:`obslab.hooks`.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from obslab.access import split_obsdim, is_composite, getobs, nobs, normalize_index
from obslab.obsdim import Undefined, as_obsdim

__all__ = ["DataSubset", "datasubset"]


class DataSubset:
    """
    Вид контейнера *data*, ограниченный индексами *indices*.

    Parameters
    ----------
    data : Any
        Любой контейнер, кроме композита (tuple).
    indices : int | Sequence[int] | range | slice | np.ndarray
        Индексы наблюдений в *data*. Одиночный int превращается в набор из одного.
    obsdim : ObsDimLike, optional
        Ось наблюдений в *data*; фиксируется при создании вида.
    """

    def __init__(self, data: Any, indices: Any, obsdim=None):
        obsdim = as_obsdim(obsdim)

        # вид от вида → сразу на исходный контейнер
        if isinstance(data, DataSubset):
            if isinstance(obsdim, Undefined):
                obsdim = data.obsdim
            local = normalize_index(indices, len(data.indices))
            indices = data.indices[np.atleast_1d(local)]
            data = data.data

        if is_composite(data):
            raise TypeError("DataSubset не принимает композит; используйте datasubset()")

        n = nobs(data, obsdim)
        idx = normalize_index(indices, n)
        self.data = data
        self.indices: np.ndarray = np.atleast_1d(np.asarray(idx, dtype=np.int64))
        self.obsdim = obsdim

    # ------------------------------------------------------------- контейнер
    def nobs(self, obsdim=None) -> int:  # noqa: D401
        return int(self.indices.size)

    def getobs(self, idx=None, obsdim=None):
        if idx is None:
            return getobs(self.data, self.indices, self.obsdim)
        local = normalize_index(idx, self.indices.size)
        return getobs(self.data, self.indices[local], self.obsdim)

    def parent_index(self, idx):
        """Индекс(ы) в исходном контейнере для локального индекса *idx*."""
        local = normalize_index(idx, self.indices.size)
        if isinstance(local, int):
            return int(self.indices[local])
        return self.indices[local]

    # ------------------------------------------------------------- удобства
    def __len__(self) -> int:
        return int(self.indices.size)

    def __getitem__(self, idx):
        return self.getobs(idx)

    def __repr__(self) -> str:  # noqa: D401
        return (
            f"{self.__class__.__name__}("
            f"data={type(self.data).__name__}, nobs={len(self)}, obsdim={self.obsdim!r})"
        )


def datasubset(data: Any, indices: Any, obsdim=None):
    """
    Вид *data* по *indices*.

    Для композита возвращается кортеж видов той же арности;
    obsdim может быть кортежем тегов (по одному на часть).
    """
    obsdim = as_obsdim(obsdim)
    if is_composite(data):
        return tuple(
            datasubset(part, indices, od) for part, od in zip(data, split_obsdim(data, obsdim))
        )
    return DataSubset(data, indices, obsdim)
