"""Command line access to the cloudherder dashboard composer.

The command surface is implemented with Typer and Rich for better help and
error ergonomics, while rendered documents on stdout remain machine-friendly.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
