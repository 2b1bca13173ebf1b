"""Activation order for a batch of newly created node controllers."""

from __future__ import annotations

from typing import Iterable, TypeVar

from controllers.interfaces import Controller

C = TypeVar("C", bound=Controller)


def schedule(controllers: Iterable[C]) -> list[C]:
    """
    Order controllers for activation.

    Highest priority first; unprioritized (0) nodes come after every positive
    and before every negative priority. ``sorted`` is stable with
    ``reverse=True``, so equal priorities keep discovery order.
    """
    return sorted(controllers, key=lambda controller: controller.priority, reverse=True)


__all__ = ["schedule"]
