"""Entry point for the microfolio CLI.

Allows running the tool as ``python -m microfolio``.
"""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
