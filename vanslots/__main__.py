"""
Entry point for ``python -m vanslots``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
