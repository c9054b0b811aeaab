"""Domain models and entities.

Pure, strict data structures (Pydantic v2). The domain knows nothing about
subprocesses, HTTP or the CLI: only deployment concepts.
"""
