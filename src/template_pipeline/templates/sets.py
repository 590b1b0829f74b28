"""
Named template sets loaded from glob patterns.
"""
import io
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Tuple, Union

from ..config.configuration import RendererConfiguration, ensure_renderer_config
from ..error.exceptions import ErrorContext, UnknownSetError
from .loader import PathLike, TemplateLoader
from .mime import MimeClassifier
from .minifier import Minifier, default_minifier
from .registry import Registry
from .renderer import engine_options

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class TemplateSet:
    """A named group of templates and the globs it is loaded from."""
    name: str
    globs: Tuple[str, ...]
    registry: Registry

    def names(self) -> List[str]:
        return self.registry.names()


class TemplateSetRenderer:
    """
    Renders templates from independently reloadable named sets.

    Every set is loaded from glob patterns relative to one base path and
    owns its own registry. Reloading a set builds a new one and only
    replaces the old set when loading succeeded.

    With ``live_reload`` enabled every ``execute`` first reloads the set it
    targets. That is meant for editing templates during development: it is
    slow, and unsafe while other threads execute templates, so configuration
    refuses it together with ``production``.
    """

    def __init__(
        self,
        base_path: PathLike,
        config: Optional[Union[RendererConfiguration, Dict[str, Any]]] = None,
        minifier: Optional[Minifier] = None,
        **overrides: Any
    ):
        self.base_path = Path(base_path)
        self.config = ensure_renderer_config(config, **overrides)
        self.classifier = MimeClassifier(self.config.extra_mime_types)
        self.minifier = minifier or default_minifier()
        self._sets: Dict[str, TemplateSet] = {}
        self._lock = threading.RLock()

    @property
    def minify(self) -> bool:
        return self.config.minify

    @minify.setter
    def minify(self, enabled: bool) -> None:
        self.config = ensure_renderer_config(self.config, minify=enabled)

    @property
    def live_reload(self) -> bool:
        return self.config.live_reload

    @live_reload.setter
    def live_reload(self, enabled: bool) -> None:
        self.config = ensure_renderer_config(self.config, live_reload=enabled)

    def _build(self, set_name: str, globs: Tuple[str, ...]) -> TemplateSet:
        loader = TemplateLoader(
            classifier=self.classifier,
            minifier=self.minifier if self.config.minify else None,
            encoding=self.config.encoding
        )
        entries = loader.load_glob_set(self.base_path, globs)
        registry = Registry(classifier=self.classifier, **engine_options(self.config))
        return TemplateSet(set_name, globs, registry.merged(entries))

    def _publish(self, template_set: TemplateSet) -> None:
        sets = dict(self._sets)
        sets[template_set.name] = template_set
        self._sets = sets

    def load(self, set_name: str, *globs: str) -> None:
        """
        Create or replace set ``set_name`` from ``globs`` under the base path.

        Raises:
            NotFoundError, FileReadError, MinifyError, TemplateSyntaxError
        """
        with self._lock:
            template_set = self._build(set_name, tuple(globs))
            self._publish(template_set)
        logger.info(
            f"Loaded template set {set_name} with {len(template_set.registry)} templates",
            extra={"set_name": set_name}
        )

    def get_set(self, set_name: str) -> TemplateSet:
        """
        Return the published set called ``set_name``.

        Raises:
            UnknownSetError: If the set was never loaded
        """
        template_set = self._sets.get(set_name)
        if template_set is None:
            raise UnknownSetError(set_name, context=ErrorContext(component="sets", operation="get_set"))
        return template_set

    def reload(self, set_name: str) -> None:
        """
        Reload one set from its recorded globs.

        The set is only replaced when the reload succeeds; on error the
        previous version keeps serving.

        Raises:
            UnknownSetError: If the set was never loaded
        """
        with self._lock:
            current = self.get_set(set_name)
            self._publish(self._build(set_name, current.globs))
        logger.debug(f"Reloaded template set {set_name}", extra={"set_name": set_name})

    def reload_all(self) -> None:
        """Reload every set, stopping at the first failure."""
        for set_name in self.set_names():
            self.reload(set_name)

    def execute(self, set_name: str, sink: TextIO, name: str, data: Any = None) -> None:
        """
        Execute template ``name`` from set ``set_name``, writing to ``sink``.

        Raises:
            UnknownSetError: If the set was never loaded
            NamespaceEmptyError, TemplateNotFoundError, TemplateExecutionError
        """
        if self.config.live_reload:
            self.reload(set_name)
        self.get_set(set_name).registry.execute(sink, name, data)

    def render(self, set_name: str, name: str, data: Any = None) -> str:
        buffer = io.StringIO()
        self.execute(set_name, buffer, name, data)
        return buffer.getvalue()

    def set_names(self) -> List[str]:
        return sorted(self._sets)

    def template_names(self, set_name: str) -> List[str]:
        return self.get_set(set_name).names()
