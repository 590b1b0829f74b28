"""Pytest configuration and fixtures."""
import pytest
from pathlib import Path

from template_pipeline.templates.renderer import Renderer

# Sources are written without trailing newlines so that minified output is exact.
TEMPLATE_FILES = {
    "index.html": (
        '<!doctype html>\n'
        '<html lang="en">\n'
        '<meta charset="utf-8">\n'
        '<title>{{ data }}</title>{% include "subdir/button.html" %}'
    ),
    "footer.html": "<p>Written by {{ data }}.",
    "subdir/button.html": '<button class="ds-button">Submit</button>',
    "button.css": "button { border: solid red 3px; min-width: 10em; }",
    "nth.js": "function nth(o) {\n  return o + (['st','nd','rd'][(o+'').match(/1?\\d\\b/) - 1] || 'th');\n}\n",
    "data.json": '{\n  "title": "{{ data.title }}",\n  "count": 3\n}',
    "feed.xml": (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed>\n'
        '  <!-- entries -->\n'
        '  <title>{{ data.title }}</title>\n'
        '</feed>'
    ),
    "notes.txt": "Dear {{ name }}, your order <{{ order }}> shipped.",
}

EXPECTED_BUTTON = "<button class=ds-button>Submit</button>"
EXPECTED_PAGE = (
    "<!doctype html><html lang=en><meta charset=utf-8><title>Hello world</title>"
    "<button class=ds-button>Submit</button>"
)
EXPECTED_CSS = "button{border:solid red 3px;min-width:10em}"
EXPECTED_JS = "function nth(o){return o+(['st','nd','rd'][(o+'').match(/1?\\d\\b/)-1]||'th');}"
EXPECTED_SAFETY = "<p>Written by &lt;script&gt;alert(&#39;You have been pwned&#39;);&lt;/script&gt;."


def write_tree(root: Path, files: dict) -> Path:
    """Write ``files`` (relative name -> text) below ``root``."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def template_dir(tmp_path):
    """Directory containing one template of every supported type."""
    return write_tree(tmp_path / "testdata", TEMPLATE_FILES)


@pytest.fixture
def renderer(template_dir):
    """Renderer with the fixture directory loaded."""
    rdr = Renderer()
    rdr.load(template_dir)
    return rdr
