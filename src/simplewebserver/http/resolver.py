"""
=============================================================================
RESOURCE RESOLVER
=============================================================================

Maps a request path onto a file under the document root.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    resolve("logo.png")                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   root / "logo.png"                                                 │
    │        │                                                             │
    │        ├── inside root?  no ──────────────────────┐                 │
    │        │                                           │                 │
    │        ├── open() ok ──► 200, root/logo.png        │                 │
    │        │                                           ▼                 │
    │        ├── not found / NUL byte ───────► 404, root/404page.html     │
    │        │                                                             │
    │        └── other OSError ──► raised (worker logs, no response)      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The MIME type is the configured one (text/html) for EVERY file. A PNG is
sent as text/html too. That is the server's long-standing behavior and
clients of it rely on it, so it is not guessed from the extension.

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)

# open() failures that mean "there is no file to serve at this path"
NOT_FOUND_ERRORS = (FileNotFoundError, IsADirectoryError, NotADirectoryError)


@dataclass(frozen=True)
class ResolvedResource:
    """
    Outcome of resolving a request path.

    `path` is the file whose content becomes the body: the requested file
    when it exists, the fallback document otherwise.
    """

    path: Path
    exists: bool
    mime_type: str
    status: HTTPStatus


class ResourceResolver:
    """
    Resolves request paths against a document root.

    Usage:
        resolver = ResourceResolver("/var/www")
        resource = resolver.resolve("index.html")
        if resource.exists:
            ...
    """

    def __init__(
        self,
        root: Union[str, Path] = ".",
        fallback_document: str = "404page.html",
        mime_type: str = "text/html",
    ):
        # Resolve once so the containment check compares absolute paths
        self.root = Path(root).resolve()
        self.fallback_path = self.root / fallback_document
        self.mime_type = mime_type

    def resolve(self, path: str) -> ResolvedResource:
        """
        Resolve a normalized request path.

        Args:
            path: Relative path from the Request (slash already stripped).

        Returns:
            A 200 resource for an openable file, a 404 resource pointing
            at the fallback document otherwise.

        Raises:
            OSError: The file exists but could not be opened for another
                     reason (permissions, too many open files, ...).
        """
        try:
            full_path = (self.root / path).resolve()
        except ValueError:
            # Embedded NUL: no such file can exist
            logger.warning(f"Invalid request path: {path!r}")
            return self.not_found()

        try:
            full_path.relative_to(self.root)
        except ValueError:
            logger.warning(f"Path escapes document root: {path}")
            return self.not_found()

        try:
            with open(full_path, "rb"):
                pass
        except NOT_FOUND_ERRORS:
            logger.debug(f"Not found: {path}")
            return self.not_found()
        except ValueError:
            logger.warning(f"Invalid request path: {path!r}")
            return self.not_found()

        return ResolvedResource(
            path=full_path,
            exists=True,
            mime_type=self.mime_type,
            status=HTTPStatus.OK,
        )

    def not_found(self) -> ResolvedResource:
        """The 404 outcome: fallback document, same fixed MIME type."""
        return ResolvedResource(
            path=self.fallback_path,
            exists=False,
            mime_type=self.mime_type,
            status=HTTPStatus.NOT_FOUND,
        )
