"""
Main entry point for the paperchat CLI.

This module is executed when running `python -m paperchat` or via the `paperchat` executable.
"""

from .cli import app


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
