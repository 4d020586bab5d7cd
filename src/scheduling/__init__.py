"""Daily run scheduling.

This package triggers the pipeline at a fixed local time each day.
It is owned by the process entry point, never by the pipeline.
"""
