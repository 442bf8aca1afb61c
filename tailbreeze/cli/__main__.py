"""
Entry point for running the Tailbreeze CLI as a module.

Usage: python -m tailbreeze.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
