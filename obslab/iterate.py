# obslab/iterate.py
"""
obslab.iterate
──────────────
Ленивое разрешение целей: :func:`iter_targets` → :class:`TargetIterator`.

В отличие от :func:`obslab.resolve.resolve_targets` итератор ВСЕГДА идёт
по одному наблюдению; bulk-хук здесь не используется.

Порядок действий
----------------
1. Перед началом итерации (не при создании!) композит без функции
   извлечения и без bulk-хука сводится к последнему элементу – один раз.
2. Для каждого индекса ``i`` по возрастанию:

   * задана *f*          → ``f(getobs(c, i))``;
   * есть single-хук     → ``hook(i, obsdim)`` (``getobs`` не вызывается);
   * иначе               → ``getobs(c, i)``; у композита берётся последнее
     под-наблюдение (и ещё один раз, если последняя часть – тоже композит),
     затем применяется хук наблюдения.

Ошибки возникают лениво – на том элементе, где они случились.
Каждый вызов ``iter()`` начинает заново.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Optional

from obslab.access import split_obsdim, getobs, is_composite, nobs
from obslab.config import get_config
from obslab.hooks import Strategy, select_strategy, single_target_hook
from obslab.obsdim import as_obsdim
from obslab.resolve import gettarget

__all__ = ["TargetIterator", "iter_targets"]

logger = logging.getLogger(__name__)


class TargetIterator:
    """
    Ленивая последовательность целей длины ``nobs``.

    Объект не хранит состояния между проходами; ``len()`` вычисляется по
    контейнеру при каждом вызове.
    """

    def __init__(self, data: Any, f: Optional[Callable[[Any], Any]] = None, obsdim=None):
        self.data = data
        self.f = f
        self.obsdim = as_obsdim(obsdim)

    # ------------------------------------------------------------------
    def _resolve_container(self):
        """Свести композит к последнему элементу (один шаг, как в resolve)."""
        data, obsdim = self.data, self.obsdim
        strategy = select_strategy(data, self.f)
        if strategy is Strategy.COMPOSITE:
            if get_config().check_nobs:
                nobs(data, obsdim)
            data, obsdim = data[-1], split_obsdim(data, obsdim)[-1]
        return data, obsdim

    def _generate(self) -> Iterator[Any]:
        data, obsdim = self._resolve_container()
        n = nobs(data, obsdim)

        if self.f is not None:
            mode = "extractor"
        elif single_target_hook(data) is not None:
            mode = "single_hook"
        else:
            mode = "getobs"
        if get_config().log_strategy:
            logger.debug("iter_targets: %s → %s (nobs=%d)", type(data).__name__, mode, n)

        if mode == "extractor":
            for i in range(n):
                yield self.f(getobs(data, i, obsdim))
            return

        if mode == "single_hook":
            hook = single_target_hook(data)
            for i in range(n):
                yield hook(i, obsdim)
            return

        composite = is_composite(data)
        nested = composite and is_composite(data[-1])
        for i in range(n):
            obs = getobs(data, i, obsdim)
            if composite:
                obs = obs[-1]
                if nested:
                    obs = obs[-1]
            yield gettarget(obs)

    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Any]:
        return self._generate()

    def __len__(self) -> int:
        data, obsdim = self._resolve_container()
        return nobs(data, obsdim)

    def __repr__(self) -> str:  # noqa: D401
        return (
            f"{self.__class__.__name__}("
            f"data={type(self.data).__name__}, "
            f"f={'None' if self.f is None else getattr(self.f, '__name__', repr(self.f))}, "
            f"obsdim={self.obsdim!r})"
        )


def iter_targets(data: Any, f: Optional[Callable[[Any], Any]] = None, obsdim=None) -> TargetIterator:
    """
    Ленивая последовательность целей контейнера *data* (см. модуль).

    У массивов по умолчанию наблюдения – строки (First); для матрицы,
    где наблюдения – столбцы, нужен ``obsdim="last"``.
    """
    return TargetIterator(data, f, obsdim)
