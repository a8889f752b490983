"""Streaming package: framing, delta accumulation and the stream read loop."""

from .frame_parser import StreamFrameParser, iter_frames, parse_line
from .delta_accumulator import DeltaAccumulator, AccumulatorState
from .streaming import ChatStreamEvent
from .streaming_metrics import StreamMetrics
from .streaming_finalize import finalize_stream
from .stream_consumer import StreamConsumer, StreamStarter
from .stream_controller import StreamController

__all__ = [
    "StreamFrameParser",
    "iter_frames",
    "parse_line",
    "DeltaAccumulator",
    "AccumulatorState",
    "ChatStreamEvent",
    "StreamMetrics",
    "finalize_stream",
    "StreamConsumer",
    "StreamStarter",
    "StreamController",
]
