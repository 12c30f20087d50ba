"""Web ports."""

from corsfilter.web.ports.filter import CallNext, WebFilter

__all__ = ["CallNext", "WebFilter"]
