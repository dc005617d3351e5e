"""Third-party framework hooks for xml-patch.

Only the pytest plugin lives here; pytest loads it through the ``pytest11``
entry point.
"""

from __future__ import annotations

__all__: list[str] = []
