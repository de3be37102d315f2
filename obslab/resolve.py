# obslab/resolve.py
"""
obslab.resolve
──────────────
Жадное (bulk) разрешение целей: :func:`resolve_targets`.

    resolve_targets(data)                 – цели контейнера целиком
    resolve_targets(data, f)              – f(наблюдение) для каждого наблюдения
    resolve_targets(data, f, obsdim)      – то же вдоль заданной оси

Стратегия выбирается :func:`obslab.hooks.select_strategy`:

* **EXTRACTOR**   – ``[f(getobs(data, i)) for i in range(nobs(data))]``;
                    результат ВСЕГДА ``list``, даже для одного наблюдения;
* **BULK_HOOK**   – один вызов хука на весь диапазон индексов, результат
                    возвращается как есть; ``getobs`` не вызывается;
* **COMPOSITE**   – ровно один шаг рекурсии в последний элемент кортежа;
                    вложенный композит возвращается без изменений;
* **MATERIALIZE** – ``getobs(data)``: контейнер сам и есть цели
                    (к спискам наблюдений с хуком наблюдения он применяется).

Ошибки коллабораторов (``getobs``, хуков, *f*) пробрасываются как есть.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from obslab.access import split_obsdim, getobs, nobs
from obslab.config import get_config
from obslab.hooks import Strategy, bulk_targets_hook, observation_target_hook, select_strategy
from obslab.obsdim import as_obsdim

__all__ = ["resolve_targets", "gettarget"]

logger = logging.getLogger(__name__)

Extractor = Callable[[Any], Any]


def resolve_targets(data: Any, f: Optional[Extractor] = None, obsdim=None):
    """
    Цели всех наблюдений контейнера *data*.

    Parameters
    ----------
    data : Any
        Контейнер: последовательность, массив, таблица, композит (tuple),
        пользовательский тип.
    f : callable, optional
        Функция извлечения ``obs -> target``; если задана, каждое наблюдение
        читается через ``getobs`` даже при наличии bulk-хука.
    obsdim : ObsDimLike, optional
        Ось наблюдений (для композита – один тег или кортеж тегов).
    """
    return _resolve(data, f, as_obsdim(obsdim), allow_composite=True)


def gettarget(obs: Any, f: Optional[Extractor] = None):
    """
    Цель одного, уже прочитанного наблюдения.

    ``f(obs)`` если задана *f*; иначе хук наблюдения (``__target__`` или
    зарегистрированная функция); иначе само наблюдение.
    """
    if f is not None:
        return f(obs)
    hook = observation_target_hook(obs)
    if hook is not None:
        return hook()
    return obs


# ────────────────────────────────────────────────────────────────────────────
def _last_obsdim(data: tuple, obsdim):
    return split_obsdim(data, obsdim)[-1]


def _resolve(data: Any, f: Optional[Extractor], obsdim, *, allow_composite: bool):
    strategy = select_strategy(data, f, allow_composite=allow_composite)
    if get_config().log_strategy:
        logger.debug("resolve_targets: %s → %s", type(data).__name__, strategy.value)

    if strategy is Strategy.EXTRACTOR:
        n = nobs(data, obsdim)
        return [f(getobs(data, i, obsdim)) for i in range(n)]

    if strategy is Strategy.BULK_HOOK:
        hook = bulk_targets_hook(data)
        return hook(range(nobs(data, obsdim)), obsdim)

    if strategy is Strategy.COMPOSITE:
        if get_config().check_nobs:
            nobs(data, obsdim)
        # второй раз композит не разворачиваем
        return _resolve(data[-1], None, _last_obsdim(data, obsdim), allow_composite=False)

    materialized = getobs(data, None, obsdim)
    # список наблюдений с хуком наблюдения → цели, как при итерации
    if isinstance(materialized, list) and any(
        observation_target_hook(obs) is not None for obs in materialized
    ):
        return [gettarget(obs) for obs in materialized]
    return materialized
