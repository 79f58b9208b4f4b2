# formwright/__main__.py
"""Entry point for ``python -m formwright``."""

from formwright.cli import app

if __name__ == "__main__":
    app()
