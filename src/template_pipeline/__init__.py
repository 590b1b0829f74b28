"""
Template pipeline: loads a directory of HTML, CSS, JavaScript, JSON, XML and
text templates, minifies each by MIME type, compiles them with Jinja2 and
renders them by relative path.
"""

__version__ = "1.0.0"

from .config import RendererConfiguration, load_config
from .error import (
    TemplatePipelineError,
    ConfigurationError,
    LoadError,
    NotFoundError,
    FileReadError,
    MinifyError,
    TemplateSyntaxError,
    TemplateCollisionError,
    RenderError,
    NamespaceEmptyError,
    TemplateNotFoundError,
    TemplateExecutionError,
    UnknownSetError
)
from .templates import (
    ContentClass,
    Minifier,
    default_minifier,
    Renderer,
    TemplateSetRenderer
)

__all__ = [
    'RendererConfiguration',
    'load_config',
    'Renderer',
    'TemplateSetRenderer',
    'ContentClass',
    'Minifier',
    'default_minifier',
    'TemplatePipelineError',
    'ConfigurationError',
    'LoadError',
    'NotFoundError',
    'FileReadError',
    'MinifyError',
    'TemplateSyntaxError',
    'TemplateCollisionError',
    'RenderError',
    'NamespaceEmptyError',
    'TemplateNotFoundError',
    'TemplateExecutionError',
    'UnknownSetError',
]
