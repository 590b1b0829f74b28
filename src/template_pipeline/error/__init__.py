"""
Error types raised by the template pipeline.
"""
from .exceptions import (
    ErrorContext,
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

__all__ = [
    'ErrorContext',
    'TemplatePipelineError',
    'ConfigurationError',

    # Load errors
    'LoadError',
    'NotFoundError',
    'FileReadError',
    'MinifyError',
    'TemplateSyntaxError',
    'TemplateCollisionError',

    # Render errors
    'RenderError',
    'NamespaceEmptyError',
    'TemplateNotFoundError',
    'TemplateExecutionError',
    'UnknownSetError'
]
