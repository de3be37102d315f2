# obslab/errors.py
"""
Исключения подсистемы разрешения целей (targets).

Иерархия::

    TargetsError
    ├── UnsupportedContainer   (+ TypeError)
    ├── ArityError             (+ ValueError)
    ├── NobsMismatchError      (+ ValueError)
    └── ObsDimError            (+ ValueError)

Ошибки, которые поднимают сами контейнеры, хуки или функция извлечения,
**не** оборачиваются и не перехватываются: пользователь видит их как есть.
"""

from __future__ import annotations

__all__ = [
    "TargetsError",
    "UnsupportedContainer",
    "ArityError",
    "NobsMismatchError",
    "ObsDimError",
]


class TargetsError(Exception):
    """Базовый класс всех ошибок obslab."""


class UnsupportedContainer(TargetsError, TypeError):
    """Значение не является контейнером: нет ни nobs/getobs, ни хуков."""

    def __init__(self, data, what: str = "nobs/getobs"):
        self.data_type = type(data)
        super().__init__(
            f"{self.data_type.__name__}: не поддерживает {what} "
            f"и не является композитом (tuple)"
        )


class ArityError(TargetsError, ValueError):
    """Композит (tuple) с числом элементов меньше допустимого."""


class NobsMismatchError(TargetsError, ValueError):
    """Части композита содержат разное число наблюдений."""


class ObsDimError(TargetsError, ValueError):
    """Тег оси наблюдений недопустим для данного контейнера."""
