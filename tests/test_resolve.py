"""
Тесты resolve_targets (жадное разрешение целей).

Покрываем:
    ✓ контейнер сам является целями (list, ndarray, tensor);
    ✓ композит: один шаг рекурсии, вложенный композит без изменений;
    ✓ приоритет функции извлечения над bulk-хуком;
    ✓ обход дорогих наблюдений через bulk-хук;
    ✓ форма результата при «пустой» функции извлечения;
    ✓ ArityError / UnsupportedContainer / NobsMismatchError;
    ✓ проброс ошибок коллабораторов без изменений;
    ✓ obsdim (тег и кортеж тегов), datasubset, хуки наблюдений, логирование.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest
import torch

from obslab import (
    ArityError,
    NobsMismatchError,
    UnsupportedContainer,
    config_context,
    datasubset,
    resolve_targets,
)
from obslab.obsdim import LAST


# ─────────────────────────────────────────────────────────────────────────────
#                                  HELPERS
# ─────────────────────────────────────────────────────────────────────────────
class Sample:
    """Наблюдение с хуком цели."""

    def __init__(self, features, label):
        self.features = features
        self.label = label

    def __target__(self):
        return self.label


# ─────────────────────────────────────────────────────────────────────────────
#                          КОНТЕЙНЕР = ЦЕЛИ (fallback)
# ─────────────────────────────────────────────────────────────────────────────
def test_plain_list_is_its_own_targets():
    data = [1, 2, 3, 4]
    out = resolve_targets(data)
    assert out == [1, 2, 3, 4]
    assert out is data


def test_matrix_is_returned_unchanged(matrix):
    assert resolve_targets(matrix) is matrix
    assert resolve_targets(matrix, obsdim="last") is matrix


def test_tensor_is_returned_unchanged():
    t = torch.arange(6).reshape(3, 2)
    assert resolve_targets(t) is t


def test_range_is_materialized_as_list():
    assert resolve_targets(range(3)) == [0, 1, 2]


# ─────────────────────────────────────────────────────────────────────────────
#                                КОМПОЗИТЫ
# ─────────────────────────────────────────────────────────────────────────────
def test_tuple_resolves_to_last_element():
    X = np.arange(8).reshape(4, 2)
    y = [0, 1, 0, 1]
    assert resolve_targets((X, y)) is y


def test_tuple_recursion_is_single_level():
    A, B, D = [1, 2], [3, 4], [5, 6]
    out = resolve_targets((A, (B, D)))
    assert out == (B, D)
    assert out[0] is B and out[1] is D


def test_three_part_tuple_uses_last():
    assert resolve_targets(([1, 2], [3, 4], ["a", "b"])) == ["a", "b"]


@pytest.mark.parametrize("data", [(), ([1, 2],)])
def test_short_tuple_raises_arity_error(data):
    with pytest.raises(ArityError):
        resolve_targets(data)


def test_nested_singleton_tuple_is_not_recursed():
    # рекурсия уже израсходована – вложенный кортеж материализуется как есть
    out = resolve_targets(([1, 2], ([3, 4],)))
    assert out == ([3, 4],)


def test_nobs_mismatch_in_composite():
    with pytest.raises(NobsMismatchError):
        resolve_targets(([1, 2, 3], [1, 2]))
    with config_context(check_nobs=False):
        assert resolve_targets(([1, 2, 3], [1, 2])) == [1, 2]


def test_composite_with_per_part_obsdim(matrix):
    y = ["a", "b", "c"]
    assert resolve_targets((matrix, y), obsdim=("last", None)) is y
    # без кортежа матрица 2×3 «по строкам» не согласуется с y
    with pytest.raises(NobsMismatchError):
        resolve_targets((matrix, y))


def test_composite_with_broadcast_obsdim(matrix):
    Y = np.array([[7, 8, 9]])
    assert resolve_targets((matrix, Y), obsdim="last") is Y


# ─────────────────────────────────────────────────────────────────────────────
#                         ФУНКЦИЯ ИЗВЛЕЧЕНИЯ И ХУКИ
# ─────────────────────────────────────────────────────────────────────────────
def test_extractor_wins_over_bulk_hook(counting):
    out = resolve_targets(counting, lambda obs: obs + 1)
    assert out == [11, 21, 31]
    assert counting.getobs_calls == 3
    assert counting.hook_calls == 0


def test_bulk_hook_used_without_extractor(counting):
    assert resolve_targets(counting) == ["x", "y", "z"]
    assert counting.hook_calls == 1
    assert counting.getobs_calls == 0


def test_hook_bypasses_expensive_access(expensive):
    assert resolve_targets(expensive) == ["a", "b", "c", "d"]
    # хук вызван ровно один раз на весь диапазон
    assert len(expensive.hook_calls) == 1
    assert expensive.hook_calls[0][0] == [0, 1, 2, 3]

    with pytest.raises(RuntimeError, match="дорогое чтение"):
        resolve_targets(expensive, lambda obs: obs)


def test_bulk_hook_receives_obsdim(expensive):
    resolve_targets(expensive, obsdim="last")
    assert expensive.hook_calls[-1][1] == LAST


def test_hook_results_are_idempotent(expensive):
    first = resolve_targets(expensive)
    second = resolve_targets(expensive)
    assert first == second
    assert len(expensive.hook_calls) == 2


def test_extractor_always_returns_list():
    out = resolve_targets([7], lambda x: x)
    assert out == [7] and isinstance(out, list)

    single = resolve_targets(np.array([[5, 6]]), lambda x: x)
    assert isinstance(single, list) and len(single) == 1
    np.testing.assert_array_equal(single[0], [5, 6])


def test_noop_extractor_changes_shape(matrix):
    out = resolve_targets(matrix, lambda x: x, "last")
    assert isinstance(out, list) and len(out) == 3
    for got, expected in zip(out, ([1, 2], [3, 4], [5, 6])):
        np.testing.assert_array_equal(got, expected)


def test_extractor_sees_whole_composite_observation():
    X = np.arange(6).reshape(3, 2)
    y = [0, 1, 2]
    out = resolve_targets((X, y), lambda obs: (int(obs[0].sum()), obs[1] * 10))
    assert out == [(1, 0), (5, 10), (9, 20)]


def test_observation_hook_applied_on_materialization():
    data = [Sample([0.1], "cat"), Sample([0.2], "dog")]
    assert resolve_targets(data) == ["cat", "dog"]
    # функция извлечения заменяет хук наблюдения
    assert resolve_targets(data, lambda s: s.features) == [[0.1], [0.2]]


# ─────────────────────────────────────────────────────────────────────────────
#                                  ОШИБКИ
# ─────────────────────────────────────────────────────────────────────────────
@pytest.mark.parametrize("data", [object(), 5, "abc", {"a": 1}])
def test_unsupported_container(data):
    with pytest.raises(UnsupportedContainer):
        resolve_targets(data)


def test_unsupported_is_type_error():
    with pytest.raises(TypeError):
        resolve_targets(object())


def test_extractor_error_is_propagated_unmodified():
    err = ValueError("плохое наблюдение")

    def boom(_obs):
        raise err

    with pytest.raises(ValueError) as info:
        resolve_targets([1, 2], boom)
    assert info.value is err


# ─────────────────────────────────────────────────────────────────────────────
#                          DataSubset и логирование
# ─────────────────────────────────────────────────────────────────────────────
def test_subset_forwards_bulk_hook(expensive):
    sub = datasubset(expensive, [2, 0])
    assert resolve_targets(sub) == ["c", "a"]
    assert expensive.hook_calls[-1][0] == [2, 0]


def test_subset_of_composite():
    X = np.arange(8).reshape(4, 2)
    y = ["a", "b", "c", "d"]
    assert resolve_targets(datasubset((X, y), [3, 1])) == ["d", "b"]


def test_subset_of_array_materializes_rows():
    A = np.arange(10).reshape(5, 2)
    out = resolve_targets(datasubset(A, slice(1, 3)))
    np.testing.assert_array_equal(out, [[2, 3], [4, 5]])


def test_strategy_is_logged(expensive, caplog):
    with caplog.at_level(logging.DEBUG, logger="obslab.resolve"):
        resolve_targets(expensive)
    assert any("bulk_hook" in r.getMessage() for r in caplog.records)


def test_strategy_logging_can_be_disabled(expensive, caplog):
    with config_context(log_strategy=False):
        with caplog.at_level(logging.DEBUG, logger="obslab.resolve"):
            resolve_targets(expensive)
    assert not [r for r in caplog.records if r.name == "obslab.resolve"]
