"""
Template loading, minification, compilation and rendering.
"""

from .mime import ContentClass, MimeClassifier
from .minifier import Minifier, default_minifier
from .engine import Namespace
from .registry import Registry, TemplateEntry
from .loader import TemplateLoader
from .renderer import Renderer
from .sets import TemplateSet, TemplateSetRenderer

__all__ = [
    'ContentClass',
    'MimeClassifier',
    'Minifier',
    'default_minifier',
    'Namespace',
    'Registry',
    'TemplateEntry',
    'TemplateLoader',
    'Renderer',
    'TemplateSet',
    'TemplateSetRenderer',
]
