import pytest

from template_pipeline.error import (
    ConfigurationError,
    ErrorContext,
    FileReadError,
    LoadError,
    MinifyError,
    NamespaceEmptyError,
    NotFoundError,
    RenderError,
    TemplateCollisionError,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplatePipelineError,
    TemplateSyntaxError,
    UnknownSetError,
)


def test_str_includes_context():
    error = TemplatePipelineError("boom", context=ErrorContext(component="loader", operation="load_tree"))
    assert str(error) == "boom [in loader.load_tree]"
    assert str(TemplatePipelineError("boom")) == "boom"


def test_not_found_message():
    error = NotFoundError("/srv/templates")
    assert str(error) == "asked to scan template directory /srv/templates which does not exist"
    assert error.details == {"path": "/srv/templates"}


def test_namespace_empty_message():
    assert str(NamespaceEmptyError("HTML")) == "no HTML templates found"
    assert str(NamespaceEmptyError("text", template_name="a.css")) == "no text templates found"


def test_syntax_error_details():
    error = TemplateSyntaxError("page.html", "unexpected '}'", lineno=3)
    assert "page.html (line 3)" in str(error)
    assert error.details["lineno"] == 3


@pytest.mark.parametrize("error, group", [
    (NotFoundError("x"), LoadError),
    (FileReadError("x", "denied"), LoadError),
    (MinifyError("text/css", "bad"), LoadError),
    (TemplateSyntaxError("x", "bad"), LoadError),
    (TemplateCollisionError("x", "/a/x", "/b/x"), LoadError),
    (NamespaceEmptyError("HTML"), RenderError),
    (TemplateNotFoundError("x"), RenderError),
    (TemplateExecutionError("x", "bad"), RenderError),
    (UnknownSetError("x"), RenderError),
    (ConfigurationError("bad"), TemplatePipelineError),
])
def test_error_groups(error, group):
    assert isinstance(error, group)
    assert isinstance(error, TemplatePipelineError)
