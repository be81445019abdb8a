from sitebuild.tracing.span import Span
from sitebuild.tracing.tracer import Tracer

__all__ = ["Span", "Tracer"]
