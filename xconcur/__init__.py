"""Thread-based concurrency helpers: concurrent and sharded maps, a resource manager, a spin lock, context-controlled tasks, retries and bounded workers."""

__version__ = "0.1.0"