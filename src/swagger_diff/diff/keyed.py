"""Set difference over two keyed collections.

Every higher-level comparison (paths, methods, parameters, object
properties) starts here.
"""

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class KeyedDiff(Generic[K, V]):
    increased: dict[K, V] = field(default_factory=dict)
    missing: dict[K, V] = field(default_factory=dict)
    shared_keys: list[K] = field(default_factory=list)


def keyed_diff(old: Mapping[K, V] | None, new: Mapping[K, V] | None) -> KeyedDiff[K, V]:
    """Split two mappings into added, removed and shared keys.

    ``increased`` and ``shared_keys`` follow the iteration order of ``new``,
    ``missing`` follows ``old``. A None mapping counts as empty.
    """
    old = old or {}
    new = new or {}

    increased = {k: v for k, v in new.items() if k not in old}
    missing = {k: v for k, v in old.items() if k not in new}
    shared_keys = [k for k in new if k in old]

    return KeyedDiff(increased=increased, missing=missing, shared_keys=shared_keys)
