"""Buildwatch bridge - the producer side of the monitor.

Modules
-------
sources
    Opens a saved structured log or spawns the build engine, yielding
    raw lines.
channel
    ``MessageChannel`` decodes lines on a reader thread and hands typed
    messages to the consumer without blocking either side.
"""
