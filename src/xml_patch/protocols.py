"""Collaborator protocols for xml-patch extension points.

Defines the two narrow interfaces the differencer and merger depend on.
Any class with a conformant method passes ``isinstance`` checks; no
inheritance required.

Example::

    from xml_patch.protocols import PatchSink

    class PrintingSink:
        def accept(self, event):
            print(event.difference, event.address)

    assert isinstance(PrintingSink(), PatchSink)  # structural conformance
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from xml_patch.events import PatchEvent
    from xml_patch.listeners import Severity


@runtime_checkable
class PatchSink(Protocol):
    """Consumer of the differencer's event stream.

    ``accept`` is called once per event in emission order.  The differencer
    knows nothing about what the sink does with events (serialize, render,
    collect).
    """

    def accept(self, event: PatchEvent) -> None: ...


@runtime_checkable
class EventListener(Protocol):
    """Receiver of operational notifications.

    ``template`` uses ``str.format`` positional fields (``"{0}"``) and
    ``args`` fills them.  Listeners decide how (and whether) to render.
    """

    def event(self, severity: Severity, template: str, *args: object) -> None: ...
