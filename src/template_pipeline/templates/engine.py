"""
Jinja2 adapter: compiled template namespaces.
"""
import logging
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, TextIO

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateError,
    TemplateNotFound,
    TemplateSyntaxError as JinjaSyntaxError,
    Undefined,
)

from ..error.exceptions import (
    ErrorContext,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplateSyntaxError,
)
from .mime import ContentClass

logger = logging.getLogger(__name__)

DATA_VARIABLE = "data"

SAFE_URL_SCHEMES = {"http", "https", "mailto"}
# Written in place of a URL with a rejected scheme
UNSAFE_URL = "#ZgotmplZ"
URL_IGNORED_CHARS_RE = re.compile(r"[\x00-\x20]")


def safe_url(value: Any) -> str:
    """
    Return ``value`` as a URL that cannot run script.

    Relative URLs and http, https and mailto URLs pass through; any other
    scheme is replaced by ``#ZgotmplZ``. Browsers ignore control characters
    and whitespace inside a scheme, so those are dropped before comparing.
    """
    url = str(value)
    scheme, separator, _ = url.partition(":")
    if not separator or "/" in scheme or "?" in scheme or "#" in scheme:
        return url
    if URL_IGNORED_CHARS_RE.sub("", scheme).lower() not in SAFE_URL_SCHEMES:
        return UNSAFE_URL
    return url


def build_context(data: Any) -> Dict[str, Any]:
    """
    Turn the caller's data value into template variables.

    The value is always available as ``data``; a mapping also contributes
    its string keys as top-level variables.
    """
    context: Dict[str, Any] = {}
    if isinstance(data, Mapping):
        context.update((key, value) for key, value in data.items() if isinstance(key, str))
    context[DATA_VARIABLE] = data
    return context


class Namespace:
    """
    A set of templates compiled into one Jinja2 environment.

    Every template can include, import or extend every other template of the
    same namespace by name. The namespace is immutable: it is built from a
    complete name-to-source mapping and all templates are compiled eagerly.
    """

    def __init__(
        self,
        content_class: ContentClass,
        sources: Mapping,
        strict_undefined: bool = True,
        trim_blocks: bool = True,
        lstrip_blocks: bool = True
    ):
        """
        Compile a namespace.

        Args:
            content_class: HTML_FAMILY enables HTML entity auto-escaping
            sources: Template name to (minified) source text
            strict_undefined: Raise on undefined variables instead of rendering ""
            trim_blocks: Jinja2 ``trim_blocks``
            lstrip_blocks: Jinja2 ``lstrip_blocks``

        Raises:
            TemplateSyntaxError: If any source fails to compile
        """
        self.content_class = content_class
        self._sources = MappingProxyType(dict(sources))
        self.env = Environment(
            loader=DictLoader(self._sources),
            autoescape=content_class is ContentClass.HTML_FAMILY,
            undefined=StrictUndefined if strict_undefined else Undefined,
            trim_blocks=trim_blocks,
            lstrip_blocks=lstrip_blocks,
            auto_reload=False,
            cache_size=-1
        )
        self.env.filters["safe_url"] = safe_url
        self._templates: Dict[str, Template] = {}
        for name in self._sources:
            self._templates[name] = self._compile(name)
        logger.debug(f"Compiled {len(self._templates)} {content_class.value} templates")

    def _compile(self, name: str) -> Template:
        try:
            return self.env.get_template(name)
        except JinjaSyntaxError as e:
            raise TemplateSyntaxError(
                name,
                e.message or str(e),
                lineno=e.lineno,
                context=ErrorContext(component="engine", operation="compile")
            ) from e

    @property
    def autoescape(self) -> bool:
        return self.content_class is ContentClass.HTML_FAMILY

    @property
    def sources(self) -> Mapping:
        return self._sources

    def names(self) -> List[str]:
        return sorted(self._templates)

    def __contains__(self, name: str) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def generate(self, name: str, data: Any) -> Iterator[str]:
        """
        Yield rendered chunks of template ``name``.

        Raises:
            TemplateNotFoundError: If no template has that exact name
            TemplateExecutionError: If rendering fails part way
        """
        template = self._templates.get(name)
        if template is None:
            raise TemplateNotFoundError(
                name, context=ErrorContext(component="engine", operation="execute")
            )
        try:
            for chunk in template.generate(build_context(data)):
                yield chunk
        except TemplateNotFound as e:
            raise TemplateExecutionError(
                name,
                f"included template not found: {e.name}",
                context=ErrorContext(component="engine", operation="execute")
            ) from e
        except TemplateError as e:
            raise TemplateExecutionError(
                name, str(e), context=ErrorContext(component="engine", operation="execute")
            ) from e
        except (AttributeError, LookupError, TypeError, ValueError, ArithmeticError) as e:
            raise TemplateExecutionError(
                name,
                f"{e.__class__.__name__}: {e}",
                context=ErrorContext(component="engine", operation="execute")
            ) from e

    def execute(self, sink: TextIO, name: str, data: Any) -> None:
        """
        Render template ``name`` into ``sink`` chunk by chunk.

        Output is not buffered: when an error is raised, whatever was rendered
        before the failure has already been written to ``sink``.
        """
        for chunk in self.generate(name, data):
            sink.write(chunk)

    def render(self, name: str, data: Any) -> str:
        return "".join(self.generate(name, data))
