"""Buildwatch core - decoding and state reconstruction.

Modules
-------
ingestor
    Decodes the structured log, one message per line.
derivation
    Pure functions computing display fields from edge payloads.
build_state
    ``BuildState`` merges started/finished events into edge records.
"""
