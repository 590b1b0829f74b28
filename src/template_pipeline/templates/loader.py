"""
Template discovery: walks directories or expands globs and turns every file
into a classified, minified TemplateEntry.
"""
import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..error.exceptions import ErrorContext, FileReadError, NotFoundError
from .mime import ContentClass, MimeClassifier
from .minifier import Minifier
from .registry import TemplateEntry

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def existing_directory(path: PathLike, operation: str) -> Path:
    """Return ``path`` as a Path, raising NotFoundError unless it is a directory."""
    directory = Path(path)
    if not directory.is_dir():
        raise NotFoundError(str(path), context=ErrorContext(component="loader", operation=operation))
    return directory


def is_within(base: Path, path: Path) -> bool:
    """True when ``path`` is ``base`` or below it once ``..`` segments are collapsed."""
    base_abs = os.path.normpath(os.path.abspath(base))
    path_abs = os.path.normpath(os.path.abspath(path))
    return os.path.commonpath([base_abs, path_abs]) == base_abs


class TemplateLoader:
    """Reads, classifies and minifies template source files."""

    def __init__(
        self,
        classifier: Optional[MimeClassifier] = None,
        minifier: Optional[Minifier] = None,
        encoding: str = "utf-8"
    ):
        """
        Initialize the loader.

        Args:
            classifier: MIME lookup for file names
            minifier: Minifier to apply, or None to keep sources verbatim
            encoding: Encoding of source files
        """
        self.classifier = classifier or MimeClassifier()
        self.minifier = minifier
        self.encoding = encoding

    def load_tree(self, root: PathLike) -> List[TemplateEntry]:
        """
        Load every regular file below ``root``.

        Files are visited in lexical order. Each is named by its path relative
        to ``root`` with forward slashes. The first failing file aborts the
        whole walk.

        Raises:
            NotFoundError: If ``root`` is not an existing directory
            FileReadError: If a file cannot be read or decoded
            MinifyError: If a file is rejected by its minifier
        """
        base = existing_directory(root, "load_tree")
        entries = []
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames.sort()
            for filename in sorted(filenames):
                path = Path(dirpath) / filename
                if path.is_file():
                    entries.append(self.load_file(base, path))
        logger.debug(f"Read {len(entries)} template files under {base}", extra={"root": str(base)})
        return entries

    def load_glob_set(self, base_path: PathLike, globs: Iterable[str]) -> List[TemplateEntry]:
        """
        Load the files matched by ``globs`` under ``base_path``.

        Each pattern is expanded independently and in the given order;
        directories matched by a pattern are skipped, and so are matches that
        lie outside ``base_path`` (``../other/*.txt``). A file matched by more
        than one pattern is loaded once per match, the last load winning.

        Raises:
            NotFoundError: If ``base_path`` is not an existing directory
            FileReadError: If a file cannot be read or decoded
            MinifyError: If a file is rejected by its minifier
        """
        base = existing_directory(base_path, "load_glob_set")
        entries = []
        for pattern in globs:
            matches = sorted(base.glob(pattern))
            if not matches:
                logger.warning(f"Pattern {pattern} matched no files under {base}", extra={"root": str(base)})
            for path in matches:
                if not is_within(base, path):
                    logger.warning(
                        f"Pattern {pattern} matched {path} outside {base}, skipping",
                        extra={"root": str(base)}
                    )
                    continue
                if path.is_file():
                    entries.append(self.load_file(base, path))
        return entries

    def load_file(self, base: Path, path: Path) -> TemplateEntry:
        """Read, classify and minify one file named relative to ``base``."""
        name = path.relative_to(base).as_posix()
        try:
            source = path.read_bytes().decode(self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(
                str(path), str(e), context=ErrorContext(component="loader", operation="read")
            ) from e

        mime_type = self.classifier.type_for(name)
        if self.minifier is not None:
            source = self.minifier.minify(mime_type, source, template_name=name)

        content_class = ContentClass.from_mime_type(mime_type)
        logger.debug(
            f"Loaded {name} as {mime_type or 'unknown type'} ({content_class.value})",
            extra={"template_name": name, "root": str(base)}
        )
        return TemplateEntry(
            name=name,
            content_class=content_class,
            mime_type=mime_type,
            source=source,
            path=str(path),
            origin=str(base)
        )
