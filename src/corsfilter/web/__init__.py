"""corsfilter web integration — filter protocol and Starlette adapters."""

from corsfilter.web.filters import OncePerRequestFilter
from corsfilter.web.ports.filter import CallNext, WebFilter

__all__ = ["CallNext", "OncePerRequestFilter", "WebFilter"]
