"""Module entrypoint for ``python -m nlines``.

Argument parsing and session setup happen in ``nlines.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
