"""
Entry point for running xdgkit CLI as a module.

Usage: python -m xdgkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
