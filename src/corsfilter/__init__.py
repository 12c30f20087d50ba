"""corsfilter — Cross-Origin Resource Sharing for ASGI applications.

Build a :class:`Cors` from :class:`CORSOptions` once, then wrap an app with
:meth:`Cors.handler`, add :class:`CorsFilter` to a filter chain, or call
:meth:`Cors.serve` / :meth:`Cors.apply` from your own middleware.
"""

from corsfilter.composer import CorsResult, CorsState
from corsfilter.exceptions import ConfigurationException, CorsFilterException
from corsfilter.handler import Cors
from corsfilter.matching import RequestKind
from corsfilter.policy import CORSOptions, CORSPolicy, canonical_header_key
from corsfilter.properties import CorsProperties
from corsfilter.web.adapters.starlette.cors_filter import CorsFilter
from corsfilter.web.adapters.starlette.cors_middleware import CORSMiddleware

__version__ = "0.1.0"

__all__ = [
    "CORSMiddleware",
    "CORSOptions",
    "CORSPolicy",
    "ConfigurationException",
    "Cors",
    "CorsFilter",
    "CorsFilterException",
    "CorsProperties",
    "CorsResult",
    "CorsState",
    "RequestKind",
    "canonical_header_key",
]
