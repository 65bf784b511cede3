"""Buildwatch live monitor - the consumer side.

Modules
-------
session
    ``MonitorSession`` owns the ``BuildState``, drains the channel and
    services navigation requests with a bounded wait.
renderer
    ``MonitorRenderer`` turns ``BuildSummary`` into Rich renderables,
    including the full-screen ``Rich.Live`` mode.
keys
    Reads key presses on a thread and forwards them to the session.
"""
