"""microfolio command-line wrapper.

This package provides the ``microfolio`` command, a thin front end for the
microfolio static portfolio generator. The generator itself is a Node.js
project; this package scaffolds new projects from the upstream template and
hands ``dev``, ``build``, ``preview`` and the image commands off to the
project's package manager.

The main entry point is the CLI module.
"""

__all__ = ["__version__"]
__version__ = "0.2.0"
