"""
MIME type lookup and content classification.
"""
import mimetypes
import posixpath
from enum import Enum
from typing import Dict, Optional

HTML_PREFIX = "text/html"

class ContentClass(str, Enum):
    """Which namespace a template is compiled into."""
    HTML_FAMILY = "html"
    OTHER = "other"

    @classmethod
    def from_mime_type(cls, mime_type: str) -> 'ContentClass':
        if mime_type and mime_type.startswith(HTML_PREFIX):
            return cls.HTML_FAMILY
        return cls.OTHER

class MimeClassifier:
    """
    Resolves MIME types from file extensions.

    Only Python's built-in table is used, never the host's mime.types files,
    so the same name classifies the same way on every machine.
    """

    def __init__(self, extra_types: Optional[Dict[str, str]] = None):
        self._types = mimetypes.MimeTypes(filenames=())
        for ext, mime_type in (extra_types or {}).items():
            self.add_type(mime_type, ext)

    def add_type(self, mime_type: str, ext: str) -> None:
        """Map an extension such as ``.tmpl`` to ``mime_type``."""
        if not ext.startswith("."):
            ext = f".{ext}"
        self._types.add_type(mime_type, ext.lower())

    def type_for(self, name: str) -> str:
        """Return the MIME type for a template name, or an empty string."""
        ext = posixpath.splitext(name)[1]
        if not ext:
            return ""
        mime_type = self._types.types_map[True].get(ext) or self._types.types_map[True].get(ext.lower())
        return mime_type or ""

    def classify(self, name: str) -> ContentClass:
        return ContentClass.from_mime_type(self.type_for(name))
