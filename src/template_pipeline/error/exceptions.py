"""
Centralized exception definitions for the template pipeline.
"""

class ErrorContext:
    """Context information for errors."""

    def __init__(self, component: str = None, operation: str = None, **kwargs):
        self.component = component
        self.operation = operation
        self.details = kwargs

class TemplatePipelineError(Exception):
    """Base class for all template pipeline errors."""

    def __init__(self, message: str, context: ErrorContext = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}

    def __str__(self):
        base_str = super().__str__()
        if self.context.component and self.context.operation:
            return f"{base_str} [in {self.context.component}.{self.context.operation}]"
        return base_str

class ConfigurationError(TemplatePipelineError):
    """Error in configuration."""
    pass

# Load-time errors. Any of these aborts the load that raised it.

class LoadError(TemplatePipelineError):
    """Error while discovering, reading, minifying or compiling templates."""
    pass

class NotFoundError(LoadError):
    """A configured source root does not exist."""

    def __init__(self, path: str, context: ErrorContext = None):
        super().__init__(
            f"asked to scan template directory {path} which does not exist",
            context=context,
            details={"path": str(path)}
        )
        self.path = str(path)

class FileReadError(LoadError):
    """A discovered file could not be read."""

    def __init__(self, path: str, reason: str, context: ErrorContext = None):
        super().__init__(
            f"Failed to read template file {path}: {reason}",
            context=context,
            details={"path": str(path), "reason": reason}
        )
        self.path = str(path)

class MinifyError(LoadError):
    """The minifier rejected content for its declared type."""

    def __init__(self, mime_type: str, reason: str, template_name: str = None, context: ErrorContext = None):
        subject = f" {template_name}" if template_name else ""
        super().__init__(
            f"Failed to minify{subject} as {mime_type}: {reason}",
            context=context,
            details={"mime_type": mime_type, "template_name": template_name, "reason": reason}
        )
        self.mime_type = mime_type
        self.template_name = template_name

class TemplateSyntaxError(LoadError):
    """Compilation of a source file failed."""

    def __init__(self, template_name: str, reason: str, lineno: int = None, context: ErrorContext = None):
        where = f" (line {lineno})" if lineno else ""
        super().__init__(
            f"Syntax error in template {template_name}{where}: {reason}",
            context=context,
            details={"template_name": template_name, "reason": reason, "lineno": lineno}
        )
        self.template_name = template_name
        self.lineno = lineno

class TemplateCollisionError(LoadError):
    """Two sources produced the same template name."""

    def __init__(self, template_name: str, first: str, second: str, context: ErrorContext = None):
        super().__init__(
            f"Template {template_name} from {second} collides with the one loaded from {first}",
            context=context,
            details={"template_name": template_name, "first": first, "second": second}
        )
        self.template_name = template_name

# Render-time errors.

class RenderError(TemplatePipelineError):
    """Error while resolving or executing a template."""
    pass

class NamespaceEmptyError(RenderError):
    """No templates of the requested content class were ever loaded."""

    def __init__(self, content_class: str, template_name: str = None, context: ErrorContext = None):
        super().__init__(
            f"no {content_class} templates found",
            context=context,
            details={"content_class": content_class, "template_name": template_name}
        )
        self.content_class = content_class
        self.template_name = template_name

class TemplateNotFoundError(RenderError):
    """Named lookup failed within a populated namespace."""

    def __init__(self, template_name: str, context: ErrorContext = None):
        super().__init__(
            f"Template not found: {template_name}",
            context=context,
            details={"template_name": template_name}
        )
        self.template_name = template_name

class TemplateExecutionError(RenderError):
    """Runtime failure while rendering; output may already be partially written."""

    def __init__(self, template_name: str, reason: str, context: ErrorContext = None):
        super().__init__(
            f"Error executing template {template_name}: {reason}",
            context=context,
            details={"template_name": template_name, "reason": reason}
        )
        self.template_name = template_name

class UnknownSetError(RenderError):
    """A template set name was never registered via load."""

    def __init__(self, set_name: str, context: ErrorContext = None):
        super().__init__(
            f"Unknown template set: {set_name}",
            context=context,
            details={"set_name": set_name}
        )
        self.set_name = set_name
