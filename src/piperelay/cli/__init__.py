"""Command surface of piperelay.

``cli`` and ``main`` resolve lazily so that ``python -m piperelay.cli.main``
does not find its own module already imported.
"""

__all__ = ["cli", "main"]


def __getattr__(name):  # pragma: no cover - trivial lazy import
    if name == "cli":
        from .main import cli

        return cli
    if name == "main":
        from .main import main

        return main
    raise AttributeError(name)
