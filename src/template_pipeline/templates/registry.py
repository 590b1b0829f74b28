"""
Compiled template registry.

A Registry is an immutable snapshot: loading produces a new Registry and the
owner publishes it with a single assignment, so readers never see a
half-built one.
"""
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, TextIO

from ..error.exceptions import (
    ErrorContext,
    NamespaceEmptyError,
    TemplateCollisionError,
    TemplateNotFoundError,
)
from .engine import Namespace
from .mime import ContentClass, MimeClassifier

logger = logging.getLogger(__name__)

CLASS_LABELS = {
    ContentClass.HTML_FAMILY: "HTML",
    ContentClass.OTHER: "text",
}

@dataclass(frozen=True)
class TemplateEntry:
    """A loaded template source and how it was classified."""
    name: str
    content_class: ContentClass
    mime_type: str
    source: str
    path: str
    origin: str


def merge_entries(
    existing: Mapping[str, TemplateEntry],
    incoming: Iterable[TemplateEntry],
    on_collision: str = "overwrite"
) -> Dict[str, TemplateEntry]:
    """
    Merge ``incoming`` over ``existing``; the later entry wins a name.

    Reloading the same file is never a collision. Two different files
    producing one name are handled per ``on_collision``: ``overwrite`` logs at
    debug, ``warn`` logs a warning, ``error`` raises.
    """
    merged = dict(existing)
    for entry in incoming:
        previous = merged.get(entry.name)
        if previous is not None and previous.path != entry.path:
            if on_collision == "error":
                raise TemplateCollisionError(
                    entry.name,
                    previous.path,
                    entry.path,
                    context=ErrorContext(component="registry", operation="merge")
                )
            message = f"Template {entry.name} from {entry.path} shadows {previous.path}"
            if on_collision == "warn":
                logger.warning(message, extra={"template_name": entry.name})
            else:
                logger.debug(message, extra={"template_name": entry.name})
        merged[entry.name] = entry
    return merged


class Registry:
    """Up to two compiled namespaces plus the entries they were built from."""

    def __init__(
        self,
        entries: Optional[Mapping[str, TemplateEntry]] = None,
        classifier: Optional[MimeClassifier] = None,
        **engine_options: Any
    ):
        """
        Build a registry snapshot.

        Args:
            entries: Template name to entry
            classifier: Used to route names that were never loaded
            **engine_options: Passed to every Namespace

        Raises:
            TemplateSyntaxError: If any entry fails to compile
        """
        self._entries = MappingProxyType(dict(entries or {}))
        self._classifier = classifier or MimeClassifier()
        self._engine_options = engine_options
        self._namespaces: Dict[ContentClass, Namespace] = {}

        for content_class in ContentClass:
            sources = {
                name: entry.source
                for name, entry in self._entries.items()
                if entry.content_class is content_class
            }
            # An absent namespace means nothing of this class was ever loaded
            if sources:
                self._namespaces[content_class] = Namespace(content_class, sources, **engine_options)

    def merged(self, incoming: Iterable[TemplateEntry], on_collision: str = "overwrite") -> 'Registry':
        """Return a new Registry with ``incoming`` merged over this one."""
        entries = merge_entries(self._entries, incoming, on_collision)
        return Registry(entries, self._classifier, **self._engine_options)

    @property
    def entries(self) -> Mapping[str, TemplateEntry]:
        return self._entries

    def namespace(self, content_class: ContentClass) -> Optional[Namespace]:
        return self._namespaces.get(content_class)

    def content_class_of(self, name: str) -> ContentClass:
        """Stored class for loaded names, extension-derived class otherwise."""
        entry = self._entries.get(name)
        if entry is not None:
            return entry.content_class
        return self._classifier.classify(name)

    def resolve(self, name: str) -> Namespace:
        """
        Find the namespace that holds ``name``.

        Raises:
            NamespaceEmptyError: If no template of the name's class was loaded
            TemplateNotFoundError: If the namespace exists but lacks ``name``
        """
        content_class = self.content_class_of(name)
        namespace = self._namespaces.get(content_class)
        if namespace is None:
            raise NamespaceEmptyError(
                CLASS_LABELS[content_class],
                template_name=name,
                context=ErrorContext(component="registry", operation="resolve")
            )
        if name not in namespace:
            raise TemplateNotFoundError(
                name, context=ErrorContext(component="registry", operation="resolve")
            )
        return namespace

    def execute(self, sink: TextIO, name: str, data: Any) -> None:
        self.resolve(name).execute(sink, name, data)

    def names(self, content_class: Optional[ContentClass] = None) -> List[str]:
        return sorted(
            name for name, entry in self._entries.items()
            if content_class is None or entry.content_class is content_class
        )

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._namespaces
