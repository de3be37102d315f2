# obslab/access.py
"""
obslab.access
─────────────
Примитивы доступа к наблюдениям: :func:`nobs` и :func:`getobs`.

Это «внешние» возможности, на которые опирается ядро разрешения целей.
Модуль знает следующие виды контейнеров (проверяются строго по порядку):

1. **композит** – ``tuple`` контейнеров; наблюдение = кортеж наблюдений частей;
2. объекты с методами ``nobs(obsdim)`` / ``getobs(idx, obsdim)``
   (см. :class:`obslab.containers.ObsContainer`, :class:`obslab.subset.DataSubset`);
3. ``numpy.ndarray`` и ``torch.Tensor`` – наблюдения вдоль оси из тега obsdim;
4. ``pandas.DataFrame`` / ``pandas.Series`` – строки (``iloc``);
5. «последовательности» – всё, что умеет ``len()`` и ``[i]``
   (``list``, ``range``, ``torch.utils.data.Dataset`` …).

Всё остальное → :class:`~obslab.errors.UnsupportedContainer`.

Индексы
-------
* ``int`` (в т.ч. отрицательный)            → одно наблюдение;
* последовательность int / ``range`` / ``slice`` / numpy-массив / bool-маска
                                             → набор наблюдений (ось сохраняется);
* ``None``                                   → все наблюдения.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import numpy as np
import pandas as pd
import torch

from obslab.config import get_config
from obslab.errors import ArityError, NobsMismatchError, ObsDimError, UnsupportedContainer
from obslab.obsdim import (
    FIRST,
    UNDEFINED,
    Constant,
    First,
    Last,
    Undefined,
    as_obsdim,
)

__all__ = [
    "is_composite",
    "default_obsdim",
    "nobs",
    "getobs",
    "normalize_index",
    "split_obsdim",
]


# ────────────────────────────────────────────────────────────────────────────
#                               ВСПОМОГАТЕЛЬНОЕ
# ────────────────────────────────────────────────────────────────────────────
def is_composite(data: Any) -> bool:
    """True, если *data* – композитный контейнер (tuple)."""
    return isinstance(data, tuple)


def _has_obs_methods(data: Any) -> bool:
    return callable(getattr(data, "nobs", None)) and callable(getattr(data, "getobs", None))


def _is_array(data: Any) -> bool:
    return isinstance(data, (np.ndarray, torch.Tensor))


def _is_frame(data: Any) -> bool:
    return isinstance(data, (pd.DataFrame, pd.Series))


def _is_sequence(data: Any) -> bool:
    if isinstance(data, (str, bytes, bytearray, Mapping)):
        return False
    return hasattr(data, "__len__") and hasattr(data, "__getitem__")


def normalize_index(idx: Any, n: int):
    """
    Привести индекс к каноническому виду для контейнера из *n* наблюдений.

    ``int`` → неотрицательный ``int``; всё остальное → одномерный
    ``np.ndarray[int64]``. Выход за границы → ``IndexError``.
    """
    if isinstance(idx, (int, np.integer)) and not isinstance(idx, (bool, np.bool_)):
        i = int(idx)
        if i < 0:
            i += n
        if not 0 <= i < n:
            raise IndexError(f"индекс {idx} вне диапазона [0, {n})")
        return i

    if isinstance(idx, slice):
        return np.arange(*idx.indices(n), dtype=np.int64)
    if isinstance(idx, torch.Tensor):
        idx = idx.detach().cpu().numpy()

    arr = np.asarray(idx)
    if arr.ndim != 1:
        raise TypeError(f"ожидался одномерный набор индексов, получено ndim={arr.ndim}")
    if arr.size == 0:
        return arr.astype(np.int64)
    if arr.dtype == np.bool_:
        if arr.size != n:
            raise IndexError(f"длина bool-маски {arr.size} ≠ nobs={n}")
        return np.flatnonzero(arr).astype(np.int64)
    if not np.issubdtype(arr.dtype, np.integer):
        raise TypeError(f"индексы должны быть целыми, получено dtype={arr.dtype}")

    arr = arr.astype(np.int64)
    arr = np.where(arr < 0, arr + n, arr)
    bad = (arr < 0) | (arr >= n)
    if bad.any():
        raise IndexError(f"индексы {arr[bad].tolist()} вне диапазона [0, {n})")
    return arr


def default_obsdim(data: Any):
    """Ось наблюдений «по умолчанию» для контейнера *data*."""
    if is_composite(data):
        return tuple(default_obsdim(part) for part in data)
    if _is_array(data) or _is_frame(data):
        return FIRST
    return UNDEFINED


# ─── композиты ──────────────────────────────────────────────────────────────
def split_obsdim(data: tuple, obsdim):
    """Раздать obsdim по частям композита (кортеж тегов или один общий тег)."""
    if isinstance(obsdim, tuple):
        if len(obsdim) != len(data):
            raise ObsDimError(
                f"кортеж obsdim длины {len(obsdim)} не совпадает "
                f"с арностью композита {len(data)}"
            )
        return obsdim
    return (obsdim,) * len(data)


def _composite_nobs(data: tuple, obsdim) -> int:
    if not data:
        raise ArityError("пустой композит (tuple) не содержит наблюдений")
    counts = [nobs(part, od) for part, od in zip(data, split_obsdim(data, obsdim))]
    if get_config().check_nobs and len(set(counts)) > 1:
        raise NobsMismatchError(f"части композита содержат разное число наблюдений: {counts}")
    return counts[0]


# ─── массивы ────────────────────────────────────────────────────────────────
def _array_axis(data, obsdim) -> int:
    ndim = data.ndim
    if ndim == 0:
        raise UnsupportedContainer(data, "nobs/getobs для 0-мерного массива")
    if isinstance(obsdim, tuple):
        raise ObsDimError("кортеж obsdim допустим только для композитов")
    if isinstance(obsdim, (First, Undefined)):
        return 0
    if isinstance(obsdim, Last):
        return ndim - 1
    if isinstance(obsdim, Constant):
        axis = obsdim.dim + ndim if obsdim.dim < 0 else obsdim.dim
        if not 0 <= axis < ndim:
            raise ObsDimError(f"{obsdim!r}: ось вне диапазона для массива ndim={ndim}")
        return axis
    raise ObsDimError(f"неизвестный тег оси наблюдений: {obsdim!r}")


def _array_getobs(data, idx, obsdim):
    axis = _array_axis(data, obsdim)
    if idx is None:
        return data
    idx = normalize_index(idx, data.shape[axis])
    if isinstance(data, torch.Tensor):
        if isinstance(idx, int):
            return data.select(axis, idx)
        return data.index_select(axis, torch.as_tensor(idx, dtype=torch.long, device=data.device))
    if isinstance(idx, int):
        # базовая индексация → view без копирования
        return data[(slice(None),) * axis + (idx,)]
    return np.take(data, idx, axis=axis)


# ─── pandas ─────────────────────────────────────────────────────────────────
def _check_frame_obsdim(data, obsdim) -> None:
    if isinstance(obsdim, (First, Undefined)):
        return
    if isinstance(obsdim, Constant) and obsdim.dim == 0:
        return
    raise ObsDimError(f"{type(data).__name__}: наблюдения – только строки, получено {obsdim!r}")


# ─── последовательности ─────────────────────────────────────────────────────
def _check_sequence_obsdim(data, obsdim) -> None:
    if isinstance(obsdim, tuple):
        raise ObsDimError("кортеж obsdim допустим только для композитов")
    if not get_config().strict_obsdim:
        return
    if isinstance(obsdim, Constant) and obsdim.dim not in (0, -1):
        raise ObsDimError(f"{type(data).__name__}: у последовательности нет оси {obsdim.dim}")


# ────────────────────────────────────────────────────────────────────────────
#                                 ПУБЛИЧНЫЙ API
# ────────────────────────────────────────────────────────────────────────────
def nobs(data: Any, obsdim=None) -> int:
    """Число наблюдений в контейнере *data*."""
    obsdim = as_obsdim(obsdim)

    if is_composite(data):
        return _composite_nobs(data, obsdim)
    if _has_obs_methods(data):
        return int(data.nobs(obsdim))
    if _is_array(data):
        return int(data.shape[_array_axis(data, obsdim)])
    if _is_frame(data):
        _check_frame_obsdim(data, obsdim)
        return len(data)
    if _is_sequence(data):
        _check_sequence_obsdim(data, obsdim)
        return len(data)
    raise UnsupportedContainer(data)


def getobs(data: Any, idx: Any = None, obsdim=None):
    """
    Наблюдение(я) контейнера *data* по индексу *idx*.

    ``idx=None`` → все наблюдения целиком (массив/таблица возвращаются как есть,
    ``list`` – тоже как есть, прочие последовательности – списком).
    """
    obsdim = as_obsdim(obsdim)

    if is_composite(data):
        if not data:
            raise ArityError("пустой композит (tuple) не содержит наблюдений")
        if get_config().check_nobs:
            _composite_nobs(data, obsdim)
        return tuple(
            getobs(part, idx, od) for part, od in zip(data, split_obsdim(data, obsdim))
        )

    if _has_obs_methods(data):
        return data.getobs(idx, obsdim)

    if _is_array(data):
        return _array_getobs(data, idx, obsdim)

    if _is_frame(data):
        _check_frame_obsdim(data, obsdim)
        if idx is None:
            return data
        idx = normalize_index(idx, len(data))
        return data.iloc[idx]

    if _is_sequence(data):
        _check_sequence_obsdim(data, obsdim)
        n = len(data)
        if idx is None:
            if isinstance(data, list):
                return data
            return [data[i] for i in range(n)]
        idx = normalize_index(idx, n)
        if isinstance(idx, int):
            return data[idx]
        return [data[int(i)] for i in idx]

    raise UnsupportedContainer(data)
