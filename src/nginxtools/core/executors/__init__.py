"""Command executor implementations, one per execution strategy.

- StreamingExecutor: asyncio exec with incrementally read pipes
- BufferedExecutor: asyncio shell with output collected at exit
- SynchronousExecutor: blocking subprocess call (last resort)
"""

from nginxtools.core.executors.buffered_executor import BufferedExecutor
from nginxtools.core.executors.streaming_executor import StreamingExecutor
from nginxtools.core.executors.synchronous_executor import SynchronousExecutor

__all__ = ["BufferedExecutor", "StreamingExecutor", "SynchronousExecutor"]
