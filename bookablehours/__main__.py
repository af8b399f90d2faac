"""
Convenience entry point for running bookablehours directly.

Usage: python -m bookablehours [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
