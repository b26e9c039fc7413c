"""
In-memory document model for the runtime mode manager.

Carries the parts of a live page the mode manager touches: style
elements in the head, attributes and inline custom properties on the
root element, and event listeners on the document.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass
class StyleElement:
    """A <style> element."""

    id: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""

    def render(self) -> str:
        attrs = "".join(f' {key}="{value}"' for key, value in self._all_attributes().items())
        return f"<style{attrs}>\n{self.text}\n</style>"

    def _all_attributes(self) -> dict[str, str]:
        if self.id is None:
            return dict(self.attributes)
        return {"id": self.id, **self.attributes}


@dataclass
class RootElement:
    """The document root (<html>): attributes plus inline style properties."""

    attributes: dict[str, str] = field(default_factory=dict)
    style: dict[str, str] = field(default_factory=dict)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    def set_property(self, name: str, value: str) -> None:
        self.style[name] = value

    def get_property(self, name: str) -> str | None:
        return self.style.get(name)

    def remove_property(self, name: str) -> None:
        self.style.pop(name, None)


@dataclass(frozen=True)
class DocumentEvent:
    """An event dispatched on the document."""

    type: str
    detail: dict[str, Any] = field(default_factory=dict)


EventListener = Callable[[DocumentEvent], None]


class Document:
    """
    Minimal document: a head of style elements and a root element.

    Example:
        doc = Document()
        doc.append_child(StyleElement(id="vars", text=":root { --a: 1px; }"))
        doc.get_element_by_id("vars")
    """

    def __init__(self) -> None:
        self.head: list[StyleElement] = []
        self.root = RootElement()
        self._listeners: dict[str, list[EventListener]] = defaultdict(list)

    def get_element_by_id(self, element_id: str) -> StyleElement | None:
        for element in self.head:
            if element.id == element_id:
                return element
        return None

    def append_child(self, element: StyleElement) -> None:
        self.head.append(element)

    def remove_child(self, element: StyleElement) -> None:
        self.head.remove(element)

    def add_event_listener(self, event_type: str, listener: EventListener) -> None:
        self._listeners[event_type].append(listener)

    def remove_event_listener(self, event_type: str, listener: EventListener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: DocumentEvent) -> None:
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)

    def render_head(self) -> str:
        """Render the head's style elements as HTML."""
        return "\n".join(element.render() for element in self.head)
