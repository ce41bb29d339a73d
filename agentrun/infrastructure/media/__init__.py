from .resolvers import (
    NullMediaURIResolver, TemplateMediaURIResolver,
    HttpMediaURIResolver, CachingMediaURIResolver, build_media_resolver
)

__all__ = [
    "NullMediaURIResolver", "TemplateMediaURIResolver",
    "HttpMediaURIResolver", "CachingMediaURIResolver", "build_media_resolver",
]
