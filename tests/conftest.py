#tests/conftest.py
"""
Общие фикстуры, доступные во всех тестах.
"""

from __future__ import annotations

import numpy as np
import pytest

from obslab.config import TargetsConfig, set_config


class ExpensiveContainer:
    """
    Контейнер с «дорогими» наблюдениями: getobs всегда падает,
    а цели доступны через bulk-хук из метаданных.
    """

    def __init__(self, labels):
        self.labels = list(labels)
        self.hook_calls = []

    def nobs(self, obsdim=None):
        return len(self.labels)

    def getobs(self, idx=None, obsdim=None):
        raise RuntimeError("дорогое чтение наблюдения")

    def gettargets(self, indices, obsdim=None):
        self.hook_calls.append((list(indices), obsdim))
        return [self.labels[i] for i in indices]


class CountingContainer:
    """Контейнер, который считает обращения к getobs и к bulk-хуку."""

    def __init__(self, observations, labels=None):
        self.observations = list(observations)
        self.labels = list(labels) if labels is not None else None
        self.getobs_calls = 0
        self.hook_calls = 0

    def nobs(self, obsdim=None):
        return len(self.observations)

    def getobs(self, idx=None, obsdim=None):
        self.getobs_calls += 1
        if idx is None:
            return list(self.observations)
        return self.observations[idx]

    def gettargets(self, indices, obsdim=None):
        self.hook_calls += 1
        return [self.labels[i] for i in indices]


@pytest.fixture(autouse=True)
def _default_config():
    """Каждый тест начинается с конфигурации по умолчанию."""
    prev = set_config(TargetsConfig())
    yield
    set_config(prev)


@pytest.fixture()
def matrix() -> np.ndarray:
    """
    Матрица 2×3, наблюдения – столбцы: [1, 2], [3, 4], [5, 6].
    """
    return np.array([[1, 3, 5], [2, 4, 6]])


@pytest.fixture()
def expensive():
    return ExpensiveContainer(["a", "b", "c", "d"])


@pytest.fixture()
def counting():
    return CountingContainer([10, 20, 30], labels=["x", "y", "z"])
