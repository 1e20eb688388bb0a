"""
Convenience entry point for running timeslotgen directly.

Usage: python -m timeslotgen [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
