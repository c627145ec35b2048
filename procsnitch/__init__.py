"""procsnitch: run a process for a bounded time and chart its resource usage."""

__version__ = "0.1.0"
