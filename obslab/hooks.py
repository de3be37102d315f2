# obslab/hooks.py
"""
obslab.hooks
============

Хуки расширения и «зонд» возможностей контейнера (capability probe).

Три независимых хука
--------------------
Контейнер или тип наблюдения может реализовать любой из них (или ни одного):

1) **bulk** – все цели сразу, без чтения наблюдений::

       class MyContainer:
           def gettargets(self, indices, obsdim): ...

2) **single** – цель одного наблюдения, без чтения наблюдения::

       class MyContainer:
           def gettarget(self, index, obsdim): ...

3) **observation** – цель из уже прочитанного наблюдения::

       class MyObservation:
           def __target__(self): ...

Для чужих типов (которые нельзя дописать) те же хуки регистрируются
функциями::

    @register_bulk_targets(pd.DataFrame)
    def _df_targets(df, indices, obsdim):
        return df["label"].to_numpy()[indices]

Поиск: сначала реестр по MRO типа (от частного к общему), затем метод.
Повторная регистрация того же типа → ``KeyError`` (ошибка конфигурации).

Выбор стратегии
---------------
:func:`select_strategy` реализует строгий порядок приоритетов:

    EXTRACTOR  →  BULK_HOOK  →  COMPOSITE  →  MATERIALIZE

Функция извлечения проверяется первой и безусловно; хуки – только без неё;
композит – только если хук не найден; материализация – последний вариант.
"""

from __future__ import annotations

import enum
import functools
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Type

from obslab.access import is_composite
from obslab.errors import ArityError
from obslab.subset import DataSubset

__all__ = [
    "Strategy",
    "select_strategy",
    "bulk_targets_hook",
    "single_target_hook",
    "observation_target_hook",
    "register_bulk_targets",
    "register_single_target",
    "register_observation_target",
    "unregister_bulk_targets",
    "unregister_single_target",
    "unregister_observation_target",
]


# =============================================================================
# Реестр одного вида хуков
# =============================================================================
@dataclass
class _HookRegistry:
    """
    Реестр для одного вида хука.

    kind   – логическое имя (для сообщений об ошибках);
    method – имя метода, который ищется на типе, если в реестре пусто;
    by_type – тип -> функция ``fn(obj, *args)``.
    """

    kind: str
    method: str
    by_type: Dict[Type[Any], Callable[..., Any]] = field(default_factory=dict)

    def register(self, *types: Type[Any]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        if not types:
            raise ValueError(f"register_{self.kind}(...): нужно указать хотя бы один тип")
        for tp in types:
            if not isinstance(tp, type):
                raise TypeError(f"register_{self.kind}(...): ожидался тип, получено {tp!r}")

        def _wrap(fn: Callable[..., Any]) -> Callable[..., Any]:
            if not callable(fn):
                raise TypeError(f"register_{self.kind}(...): хук должен быть вызываемым")
            for tp in types:
                if tp in self.by_type:
                    raise KeyError(f"{self.kind} hook для {tp.__name__} уже зарегистрирован")
                self.by_type[tp] = fn
            return fn

        return _wrap

    def unregister(self, tp: Type[Any]) -> None:
        self.by_type.pop(tp, None)

    def lookup(self, obj: Any) -> Optional[Callable[..., Any]]:
        """Связанный с *obj* хук или None."""
        for klass in type(obj).__mro__:
            fn = self.by_type.get(klass)
            if fn is not None:
                return functools.partial(fn, obj)
        # метод ищем на типе: экземпляры с __getattr__ (pandas и т.п.)
        # не должны «находить» хук по имени столбца
        if callable(getattr(type(obj), self.method, None)):
            return getattr(obj, self.method)
        return None


_BULK = _HookRegistry(kind="bulk_targets", method="gettargets")
_SINGLE = _HookRegistry(kind="single_target", method="gettarget")
_OBSERVATION = _HookRegistry(kind="observation_target", method="__target__")

register_bulk_targets = _BULK.register
register_single_target = _SINGLE.register
register_observation_target = _OBSERVATION.register

unregister_bulk_targets = _BULK.unregister
unregister_single_target = _SINGLE.unregister
unregister_observation_target = _OBSERVATION.unregister


# =============================================================================
# Поиск хуков
# =============================================================================
def bulk_targets_hook(data: Any) -> Optional[Callable[[Any, Any], Any]]:
    """
    ``hook(indices, obsdim)`` для контейнера *data* или None.

    Для :class:`DataSubset` хук берётся у исходного контейнера, а локальные
    индексы переводятся в индексы исходного контейнера.
    """
    if isinstance(data, DataSubset):
        parent = _BULK.lookup(data.data)
        if parent is None:
            return None

        def _subset_hook(indices, obsdim=None):
            return parent(data.parent_index(indices), data.obsdim)

        return _subset_hook
    if is_composite(data):
        return None
    return _BULK.lookup(data)


def single_target_hook(data: Any) -> Optional[Callable[[Any, Any], Any]]:
    """``hook(index, obsdim)`` для контейнера *data* или None."""
    if isinstance(data, DataSubset):
        parent = _SINGLE.lookup(data.data)
        if parent is None:
            return None

        def _subset_hook(index, obsdim=None):
            return parent(data.parent_index(index), data.obsdim)

        return _subset_hook
    if is_composite(data):
        return None
    return _SINGLE.lookup(data)


def observation_target_hook(obs: Any) -> Optional[Callable[[], Any]]:
    """``hook()`` для наблюдения *obs* или None."""
    return _OBSERVATION.lookup(obs)


# =============================================================================
# Стратегии
# =============================================================================
class Strategy(enum.Enum):
    EXTRACTOR = "extractor"
    BULK_HOOK = "bulk_hook"
    COMPOSITE = "composite"
    MATERIALIZE = "materialize"


def select_strategy(
    data: Any,
    f: Optional[Callable[[Any], Any]] = None,
    *,
    allow_composite: bool = True,
) -> Strategy:
    """
    Выбрать стратегию разрешения целей для *data*.

    allow_composite=False используется при рекурсии: композит, до которого
    дошли повторно, не разворачивается, а материализуется как есть.
    """
    if f is not None:
        return Strategy.EXTRACTOR
    if bulk_targets_hook(data) is not None:
        return Strategy.BULK_HOOK
    if allow_composite and is_composite(data):
        if len(data) < 2:
            raise ArityError(
                f"композит из {len(data)} элемент(ов): для выделения целей "
                f"нужны хотя бы признаки и цели (≥ 2)"
            )
        return Strategy.COMPOSITE
    return Strategy.MATERIALIZE
