"""Entry point for ``python -m dockhand``."""

from dockhand.cli.app import app

if __name__ == "__main__":
    app()
