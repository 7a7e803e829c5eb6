"""
Convenience entry point for running mentorslots directly.

Usage: python -m mentorslots [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
