"""
Minification of template sources by MIME type.

Minifiers are kept in an ordered list of ``(predicate, transform)`` pairs and
the first predicate that accepts a MIME type wins. Types nobody claims are
passed through unchanged.
"""
import json
import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple, Union

import csscompressor
import htmlmin
import jsmin
from htmlmin.parser import HTMLMinParser
from lxml import etree
from packaging import version

from ..error.exceptions import ErrorContext, MinifyError

logger = logging.getLogger(__name__)

MinifyFunc = Callable[[str], str]
Predicate = Callable[[str], bool]

JS_TYPES_RE = re.compile(r"^(application|text)/(x-)?(java|ecma)script$")
JSON_TYPES_RE = re.compile(r"[/+]json$")
XML_TYPES_RE = re.compile(r"[/+]xml$")
XML_DECLARATION_RE = re.compile(r"^\s*(<\?xml[^>]*\?>)")
TEMPLATE_MARKUP_RE = re.compile(r"\{[{%#]")

# csscompressor<=0.9.5 strips whitespace inside url(), which breaks SVG data URIs.
# See https://github.com/sprymix/csscompressor/issues/9#issuecomment-1024417374
if version.parse(csscompressor.__version__) <= version.parse("0.9.5"):
    _preserve_call_tokens_original = csscompressor._preserve_call_tokens
    _url_re = csscompressor._url_re

    def _preserve_url_whitespace(*args, **kwargs):
        if args[1] is _url_re:
            kwargs["remove_ws"] = False
        return _preserve_call_tokens_original(*args, **kwargs)

    csscompressor._preserve_call_tokens = _preserve_url_whitespace


class TemplateHTMLMinParser(HTMLMinParser):
    """
    htmlmin parser that keeps attribute values quoted when they hold Jinja markup.

    Quotes are only optional for the literal source text. Once an expression is
    substituted the value may contain spaces or ``=``, which autoescaping leaves
    alone, so an unquoted value would let data add attributes to the tag.
    """

    def build_tag(self, tag, attrs, close_tag):
        attrs = list(attrs)
        if not any(value and TEMPLATE_MARKUP_RE.search(value) for _, value in attrs):
            return super().build_tag(tag, attrs, close_tag)
        remove_quotes = self.remove_optional_attribute_quotes
        self.remove_optional_attribute_quotes = False
        try:
            return super().build_tag(tag, attrs, close_tag)
        finally:
            self.remove_optional_attribute_quotes = remove_quotes


def base_type(mime_type: str) -> str:
    """Strip parameters such as ``; charset=utf-8`` from a MIME type."""
    return mime_type.split(";", 1)[0].strip().lower()


def minify_html(source: str) -> str:
    return htmlmin.minify(
        source,
        remove_comments=True,
        remove_empty_space=True,
        remove_optional_attribute_quotes=True,
        cls=TemplateHTMLMinParser
    )


def minify_css(source: str) -> str:
    return csscompressor.compress(source)


def minify_js(source: str) -> str:
    return jsmin.jsmin(source)


def minify_json(source: str) -> str:
    return json.dumps(json.loads(source), separators=(",", ":"), ensure_ascii=False)


def minify_xml(source: str) -> str:
    declaration = XML_DECLARATION_RE.match(source)
    body = source[declaration.end():] if declaration else source
    parser = etree.XMLParser(remove_blank_text=True, remove_comments=True, resolve_entities=False)
    root = etree.fromstring(body.strip().encode("utf-8"), parser=parser)
    minified = etree.tostring(root, encoding="unicode")
    if declaration:
        return declaration.group(1) + minified
    return minified


class Minifier:
    """Ordered table of minifiers keyed by MIME type predicates."""

    def __init__(self):
        self._entries: List[Tuple[Predicate, MinifyFunc]] = []

    def add(self, predicate: Predicate, func: MinifyFunc) -> None:
        """Register ``func`` for every MIME type ``predicate`` accepts."""
        self._entries.append((predicate, func))

    def add_type(self, mime_type: str, func: MinifyFunc) -> None:
        """Register ``func`` for exactly one MIME type."""
        expected = base_type(mime_type)
        self.add(lambda candidate: candidate == expected, func)

    def add_pattern(self, pattern: Union[str, Pattern], func: MinifyFunc) -> None:
        """Register ``func`` for MIME types matching a regular expression."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.add(lambda candidate: regex.search(candidate) is not None, func)

    def match(self, mime_type: str) -> Optional[MinifyFunc]:
        """Return the first registered minifier accepting ``mime_type``."""
        if not mime_type:
            return None
        candidate = base_type(mime_type)
        for predicate, func in self._entries:
            if predicate(candidate):
                return func
        return None

    def minify(self, mime_type: str, source: str, template_name: Optional[str] = None) -> str:
        """
        Minify ``source`` as ``mime_type``.

        Args:
            mime_type: MIME type of the source
            source: Text to minify
            template_name: Name used in error messages

        Returns:
            Minified text, or ``source`` unchanged when no minifier matches

        Raises:
            MinifyError: If the matching minifier rejects the content
        """
        func = self.match(mime_type)
        if func is None:
            return source
        try:
            return func(source)
        except Exception as e:
            # Third-party minifiers raise whatever their parsers raise
            raise MinifyError(
                mime_type,
                str(e) or e.__class__.__name__,
                template_name=template_name,
                context=ErrorContext(component="minifier", operation="minify")
            ) from e

    def __len__(self) -> int:
        return len(self._entries)


def default_minifier() -> Minifier:
    """Minifier covering HTML, CSS, JavaScript, JSON and XML."""
    minifier = Minifier()
    minifier.add_type("text/html", minify_html)
    minifier.add_type("text/css", minify_css)
    minifier.add_pattern(JS_TYPES_RE, minify_js)
    minifier.add_pattern(JSON_TYPES_RE, minify_json)
    minifier.add_pattern(XML_TYPES_RE, minify_xml)
    return minifier
