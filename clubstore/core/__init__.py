"""
Core utilities shared across clubstore.

This package hosts configuration, the error taxonomy, logging setup and
small helpers (ids, clock, ISO-8601 dates). Repositories and services depend
on these primitives instead of reading os.environ or the clock directly.
"""
