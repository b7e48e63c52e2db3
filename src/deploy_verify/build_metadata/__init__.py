"""Build metadata exports."""

from .build_context import BuildContext, resolve_build_context

__all__ = ["BuildContext", "resolve_build_context"]
