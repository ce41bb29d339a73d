"""
Media uri resolver adapters
"""

from typing import Dict, Optional
from collections import OrderedDict
import threading

import httpx
import structlog

from agentrun.config.settings import Settings
from agentrun.domain.history.media import MediaURIResolver, ResolutionError

logger = structlog.get_logger(__name__)


class NullMediaURIResolver(MediaURIResolver):
    """Resolver for deployments without a resource service"""

    def resolve(self, uri: str) -> str:
        raise ResolutionError(uri, "no media resolver configured")


class TemplateMediaURIResolver(MediaURIResolver):
    """Builds URLs from a template such as https://cdn.example.com/{uri}"""

    def __init__(self, template: str):
        if "{uri}" not in template:
            raise ValueError("media url template must contain a {uri} placeholder")
        self.template = template

    def resolve(self, uri: str) -> str:
        # Other braces, e.g. query placeholders, are kept verbatim
        return self.template.replace("{uri}", uri)


class HttpMediaURIResolver(MediaURIResolver):
    """Asks the resource service for the URL of a stored object.

    GET {base_url}/v1/resources/url?uri=... answers {"url": "..."}.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, client: Optional[httpx.Client] = None):
        self.client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def resolve(self, uri: str) -> str:
        try:
            response = self.client.get("/v1/resources/url", params={"uri": uri})
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            raise ResolutionError(uri, str(e)) from e
        except ValueError as e:
            raise ResolutionError(uri, f"invalid response body: {e}") from e

        url = body.get("url") if isinstance(body, dict) else None
        if not isinstance(url, str) or not url:
            raise ResolutionError(uri, "response carries no url")
        return url

    def close(self):
        self.client.close()


class CachingMediaURIResolver(MediaURIResolver):
    """LRU cache in front of another resolver; failures are not cached"""

    def __init__(self, inner: MediaURIResolver, maxsize: int = 1024):
        self.inner = inner
        self.maxsize = maxsize
        self._cache: "OrderedDict[str, str]" = OrderedDict()
        self._lock = threading.Lock()

    def resolve(self, uri: str) -> str:
        with self._lock:
            if uri in self._cache:
                self._cache.move_to_end(uri)
                return self._cache[uri]

        url = self.inner.resolve(uri)

        with self._lock:
            self._cache[uri] = url
            self._cache.move_to_end(uri)
            while len(self._cache) > self.maxsize:
                self._cache.popitem(last=False)
        return url

    def get_stats(self) -> Dict[str, int]:
        with self._lock:
            return {"cached_uris": len(self._cache), "maxsize": self.maxsize}


def build_media_resolver(settings: Settings) -> MediaURIResolver:
    """Create the resolver selected by settings"""

    if settings.media_resolver == "template":
        resolver: MediaURIResolver = TemplateMediaURIResolver(settings.media_url_template)
    elif settings.media_resolver == "http":
        resolver = HttpMediaURIResolver(
            settings.media_service_url,
            timeout=settings.media_timeout_seconds
        )
    else:
        resolver = NullMediaURIResolver()

    if settings.media_cache_enabled and settings.media_cache_size > 0:
        resolver = CachingMediaURIResolver(resolver, maxsize=settings.media_cache_size)

    logger.info("Media resolver configured",
                resolver=type(resolver).__name__,
                kind=settings.media_resolver,
                cached=settings.media_cache_enabled)
    return resolver
