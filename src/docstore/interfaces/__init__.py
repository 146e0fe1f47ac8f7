"""Protocol definitions for pluggable components."""

from .codec import RecordCodec
from .linelog import LineLog
from .pipeline import PipelineOperator

__all__ = ["RecordCodec", "LineLog", "PipelineOperator"]
