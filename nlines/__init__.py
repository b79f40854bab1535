"""Public package surface for nlines.

Exports ``main`` for programmatic CLI invocation.
The view model, command registry and controller live in submodules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main"]
