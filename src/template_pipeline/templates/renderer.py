"""
Flat renderer: one registry fed by any number of directory trees.
"""
import io
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Tuple, Union

from ..config.configuration import RendererConfiguration, ensure_renderer_config
from .loader import PathLike, TemplateLoader
from .mime import ContentClass, MimeClassifier
from .minifier import Minifier, default_minifier
from .registry import Registry

logger = logging.getLogger(__name__)


def engine_options(config: RendererConfiguration) -> Dict[str, Any]:
    return {
        "strict_undefined": config.strict_undefined,
        "trim_blocks": config.trim_blocks,
        "lstrip_blocks": config.lstrip_blocks,
    }


class Renderer:
    """
    Loads, minifies and renders templates for HTML, CSS, JS, JSON, XML and text.

    Templates are named by their path relative to the directory they were
    loaded from. HTML files are compiled with HTML auto-escaping, every other
    file without. URLs built from data need the ``safe_url`` filter.

    ``execute`` may be called from many threads at once. ``load`` and
    ``reload`` are serialised against each other and publish a fully built
    registry in one step, so concurrent executions see either the old or the
    new templates, never a mix.
    """

    def __init__(
        self,
        config: Optional[Union[RendererConfiguration, Dict[str, Any]]] = None,
        minifier: Optional[Minifier] = None,
        **overrides: Any
    ):
        """
        Initialize the renderer.

        Args:
            config: Renderer configuration or settings dictionary
            minifier: Minifier to use instead of the default table
            **overrides: Individual configuration settings
        """
        self.config = ensure_renderer_config(config, **overrides)
        self.classifier = MimeClassifier(self.config.extra_mime_types)
        self.minifier = minifier or default_minifier()
        self._roots: List[Path] = []
        self._lock = threading.RLock()
        self._registry = self._empty_registry()

    def _empty_registry(self) -> Registry:
        return Registry(classifier=self.classifier, **engine_options(self.config))

    def _loader(self) -> TemplateLoader:
        return TemplateLoader(
            classifier=self.classifier,
            minifier=self.minifier if self.config.minify else None,
            encoding=self.config.encoding
        )

    @property
    def registry(self) -> Registry:
        """The currently published registry snapshot."""
        return self._registry

    @property
    def roots(self) -> Tuple[Path, ...]:
        """Directories loaded so far, in load order."""
        return tuple(self._roots)

    def load(self, root: PathLike) -> None:
        """
        Load, minify and compile every file under ``root``.

        The directory is remembered for ``reload`` once it has loaded
        successfully. On failure the published registry is left unchanged.

        Raises:
            NotFoundError, FileReadError, MinifyError, TemplateSyntaxError,
            TemplateCollisionError
        """
        with self._lock:
            entries = self._loader().load_tree(root)
            registry = self._registry.merged(entries, self.config.on_collision)
            self._registry = registry
            self._roots.append(Path(root))
        logger.info(f"Loaded {len(entries)} templates from {root}", extra={"root": str(root)})

    # Alias for callers that parse a directory of files
    parse_files = load

    def reload(self) -> None:
        """
        Rescan every directory loaded before and recompile all templates.

        The replacement registry is built completely before it is published;
        if any directory fails, the error is raised and the previous
        templates stay in place.
        """
        with self._lock:
            loader = self._loader()
            registry = self._empty_registry()
            for root in self._roots:
                registry = registry.merged(loader.load_tree(root), self.config.on_collision)
            self._registry = registry
        logger.info(f"Reloaded {len(registry)} templates from {len(self._roots)} directories")

    def execute(self, sink: TextIO, name: str, data: Any = None) -> None:
        """
        Execute template ``name`` with ``data``, writing output to ``sink``.

        Output is streamed; if rendering fails part way, the text produced
        before the failure has already been written.

        Raises:
            NamespaceEmptyError: If no template of the name's class was loaded
            TemplateNotFoundError: If the name is unknown
            TemplateExecutionError: If rendering fails
        """
        self._registry.execute(sink, name, data)

    execute_template = execute

    def render(self, name: str, data: Any = None) -> str:
        """Execute template ``name`` and return its output as a string."""
        buffer = io.StringIO()
        self.execute(buffer, name, data)
        return buffer.getvalue()

    def template_names(self, content_class: Optional[ContentClass] = None) -> List[str]:
        return self._registry.names(content_class)

    def content_class_of(self, name: str) -> ContentClass:
        return self._registry.content_class_of(name)
