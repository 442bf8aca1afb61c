"""
Framework-neutral stylesheet serving.

:meth:`ServingLayer.handle` decides what to do with a request path:

- not ours (or serving disabled): ``None``, the host handles the request
- compiled stylesheet on disk: 200 with the file contents
- stylesheet missing and CDN fallback enabled: 302 to the CDN
- stylesheet missing otherwise: 404

The artifact is read fresh on every request so that rebuilds by the watch
process are picked up immediately.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from tailbreeze.core.exceptions import ArtifactMissing
from tailbreeze.hosting.environment import RuntimeSettings
from tailbreeze.tailwind.resolver import ReleaseResolver

logger = logging.getLogger(__name__)

CSS_CONTENT_TYPE = "text/css; charset=utf-8"
DEVELOPMENT_CACHE_CONTROL = "no-cache, no-store, must-revalidate"
PRODUCTION_CACHE_CONTROL = "public, max-age=31536000, immutable"


@dataclass
class ServeResult:
    """Status, headers and body of a response produced by the serving layer."""

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


def path_matches(path: str, serve_path: str) -> bool:
    """
    Case-insensitive, segment-aware prefix match.

    ``/tailbreeze/app.css`` matches itself and ``/tailbreeze/app.css/x`` but
    not ``/tailbreeze/app.css2``.
    """
    prefix = serve_path.rstrip("/").lower()
    candidate = path.lower()
    if not prefix:
        return True
    return candidate == prefix or candidate.startswith(prefix + "/")


class ServingLayer:
    """
    Serves the compiled stylesheet, redirects to the CDN or returns 404.

    Attributes:
        settings: Resolved runtime settings
        serve_path: URL path the stylesheet is served at
        enabled: Whether requests are intercepted at all
        resolver: Supplies the CDN fallback URL
    """

    def __init__(
        self,
        settings: RuntimeSettings,
        serve_path: str,
        serve_via_middleware: bool = True,
        resolver: Optional[ReleaseResolver] = None,
    ):
        self.settings = settings
        self.serve_path = serve_path
        self.enabled = serve_via_middleware
        self.resolver = resolver or ReleaseResolver()

    @property
    def cache_control(self) -> str:
        if self.settings.is_development:
            return DEVELOPMENT_CACHE_CONTROL
        return PRODUCTION_CACHE_CONTROL

    def handle(self, path: str) -> Optional[ServeResult]:
        """
        Decide the response for ``path``.

        Returns:
            ServeResult, or None when the request is not for the stylesheet
        """
        if not self.enabled or not path_matches(path, self.serve_path):
            return None

        try:
            body = self._read_artifact()
        except ArtifactMissing as e:
            return self._missing(e)

        return ServeResult(
            status=200,
            headers={
                "Content-Type": CSS_CONTENT_TYPE,
                "Cache-Control": self.cache_control,
            },
            body=body,
        )

    def _missing(self, error: ArtifactMissing) -> ServeResult:
        if self.settings.fallback_enabled:
            url = self.resolver.cdn_fallback_url(self.settings.version)
            logger.warning(f"{error}, redirecting to CDN: {url}")
            return ServeResult(
                status=302,
                headers={"Location": url, "Content-Type": CSS_CONTENT_TYPE},
                body=f"/* Redirecting to Tailwind CDN: {url} */".encode("utf-8"),
            )

        logger.warning(str(error))
        return ServeResult(status=404, headers={"Content-Type": CSS_CONTENT_TYPE})

    def _read_artifact(self) -> bytes:
        path = self.settings.output_path
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            raise ArtifactMissing(path) from e
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
            raise ArtifactMissing(path) from e


__all__ = [
    "CSS_CONTENT_TYPE",
    "DEVELOPMENT_CACHE_CONTROL",
    "PRODUCTION_CACHE_CONTROL",
    "ServeResult",
    "ServingLayer",
    "path_matches",
]
