"""PatchSink implementations.

- ``PatchCollector`` keeps events in memory.
- ``PatchDocumentWriter`` renders events as a patch document::

      <diff>
        <add sel="PATH" pos="before|after|prepend"? type="@attr"?>PAYLOAD</add>
        <replace sel="PATH">PAYLOAD</replace>
        <remove sel="PATH"/>
      </diff>

  ``pos`` is omitted for the default ``append``; ``type`` marks an attribute
  add whose payload is the attribute value as text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import IO

from lxml import etree

from xml_patch.events import Add, Difference, PatchEvent, Position, Remove, Replace
from xml_patch.tree.nodes import Attribute, Element, Node, Text
from xml_patch.tree.serializer import TreeSerializer

__all__ = ["PatchCollector", "PatchDocumentWriter"]


@dataclass
class PatchCollector:
    """In-memory sink; iterating yields events in emission order."""

    events: list[PatchEvent] = field(default_factory=list)

    def accept(self, event: PatchEvent) -> None:
        self.events.append(event)

    def __iter__(self) -> Iterator[PatchEvent]:
        return iter(self.events)

    def __len__(self) -> int:
        return len(self.events)

    def count(self, difference: Difference) -> int:
        return sum(1 for event in self.events if event.difference is difference)

    def addresses(self, difference: Difference | None = None) -> list[str]:
        return [
            event.address
            for event in self.events
            if difference is None or event.difference is difference
        ]


class PatchDocumentWriter:
    """Builds a ``<diff>`` patch document from events.

    The document is written to ``stream`` (if any) on ``close()``; closing is
    idempotent.  Usable as a context manager.

    Example::

        with open("changes.xml", "wb") as out, PatchDocumentWriter(out) as writer:
            Differencer().diff(source, target, writer)
    """

    def __init__(self, stream: IO[bytes] | None = None, *, pretty_print: bool = True) -> None:
        self._stream = stream
        self._serializer = TreeSerializer(pretty_print=pretty_print)
        self._root = etree.Element("diff")
        self._closed = False

    @property
    def root(self) -> etree._Element:
        return self._root

    def accept(self, event: PatchEvent) -> None:
        match event:
            case Add(address=address, value=Attribute() as attribute):
                op = self._operation("add", address)
                op.set("type", f"@{attribute.name}")
                op.text = attribute.value
            case Add(address=address, value=value, position=position):
                op = self._operation("add", address)
                if position is not Position.APPEND:
                    op.set("pos", str(position))
                self._write_payload(op, value)
            case Replace(address=address, value=value):
                op = self._operation("replace", address)
                self._write_payload(op, value)
            case Remove(address=address):
                self._operation("remove", address)

    def to_bytes(self) -> bytes:
        return etree.tostring(
            self._root,
            pretty_print=self._serializer.pretty_print,
            xml_declaration=True,
            encoding=self._serializer.encoding,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._stream is not None:
            self._stream.write(self.to_bytes())

    def __enter__(self) -> PatchDocumentWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _operation(self, tag: str, address: str) -> etree._Element:
        return etree.SubElement(self._root, tag, sel=address)

    def _write_payload(self, op: etree._Element, value: Node) -> None:
        match value:
            case Element():
                self._serializer.to_element(value, op)
            case Text(value=text) | Attribute(value=text):
                op.text = text
