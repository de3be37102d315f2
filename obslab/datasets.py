# obslab/datasets.py
"""
ContainerDataset – принимает ЛЮБОЙ контейнер, который понимают nobs/getobs.

Пример использования:
    ds = ContainerDataset((X, y), obsdim=("last", None))
    loader = DataLoader(ds, batch_size=32)

    y_all = ds.targets()                 # метки без чтения признаков, если у y есть хук
    y_sub = resolve_targets(datasubset(ds, range(100)))   # хук работает и через вид
    y_lazy = iter_targets(ds)           # те же цели по одной
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from torch.utils.data import Dataset

from obslab.access import getobs, nobs
from obslab.iterate import iter_targets
from obslab.obsdim import as_obsdim
from obslab.resolve import resolve_targets
from obslab.subset import datasubset

__all__ = ["ContainerDataset"]


class ContainerDataset(Dataset):
    """
    Итератор над контейнером наблюдений.

    * __len__     – nobs контейнера
    * __getitem__ – getobs(i); для композита (X, Y) это кортеж (x, y)
    * targets()   – resolve_targets по контейнеру
    * gettargets  – bulk‑хук: цели вида datasubset(контейнер, indices)
    * gettarget   – single‑хук: ленивая цель одного наблюдения контейнера
    """

    def __init__(
            self,
            data: Any,
            *,
            obsdim=None,
            logger: Optional[logging.Logger] = None,
    ):
        self.data = data
        self.obsdim = as_obsdim(obsdim)
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    def __len__(self):
        return nobs(self.data, self.obsdim)

    def __getitem__(self, idx):
        return getobs(self.data, idx, self.obsdim)

    def targets(self, f: Optional[Callable[[Any], Any]] = None):
        return resolve_targets(self.data, f, self.obsdim)

    # bulk‑хук: resolve_targets(ds) не читает наблюдения, если это не нужно
    # самому обёрнутому контейнеру
    def gettargets(self, indices, obsdim=None):
        view = datasubset(self.data, indices, self.obsdim)
        self.logger.debug("gettargets: %d наблюдений", nobs(view))
        return resolve_targets(view)

    # single‑хук: iter_targets(ds) совпадает с resolve_targets(ds) поэлементно
    def gettarget(self, index, obsdim=None):
        view = datasubset(self.data, [index], self.obsdim)
        return next(iter(iter_targets(view)))

    def __repr__(self) -> str:  # noqa: D401
        return (
            f"{self.__class__.__name__}("
            f"data={type(self.data).__name__}, obsdim={self.obsdim!r})"
        )
