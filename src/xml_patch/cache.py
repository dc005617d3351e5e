"""SelectorCache: LRU-backed cache of compiled selectors.

Patch documents address the same parent elements over and over (every
``add`` under one parent carries the same ``sel``), so the merger compiles
each distinct selector string once.  LRU eviction occurs silently when
``max_size`` is exceeded.  Malformed selectors are never cached: they raise
on every lookup.

Each ``SelectorCache`` instance maintains its own ``LRUCache``, so two
mergers never share state.

Example::

    from xml_patch.cache import SelectorCache

    cache = SelectorCache(max_size=256)
    selector = cache.compile("/r/c[@id='x']")
    same = cache.compile("/r/c[@id='x']")  # served from memory
    assert selector is same
"""

from __future__ import annotations

from cachetools import LRUCache

from xml_patch.selector import Selector, compile_selector

__all__ = ["SelectorCache"]


class SelectorCache:
    """LRU cache in front of ``compile_selector``.

    Args:
        max_size: Maximum number of compiled selectors held in memory.
            Defaults to 256.
    """

    def __init__(self, max_size: int = 256) -> None:
        if max_size < 1:
            msg = f"max_size must be >= 1, got {max_size}"
            raise ValueError(msg)
        self._cache: LRUCache[str, Selector] = LRUCache(maxsize=max_size)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def max_size(self) -> int:
        """Capacity in compiled selectors."""
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        """Selectors compiled and still resident."""
        return int(self._cache.currsize)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def compile(self, source: str) -> Selector:
        """Return the compiled selector for ``source``.

        Raises:
            MalformedSelectorError: If ``source`` is not a valid selector.
        """
        selector = self._cache.get(source)
        if selector is None:
            selector = compile_selector(source)
            self._cache[source] = selector
        return selector

    def clear(self) -> None:
        self._cache.clear()
