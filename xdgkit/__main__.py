"""
Entry point for running xdgkit CLI as a module.

Usage: python -m xdgkit [command] [options]
"""

from xdgkit.cli.parser import main

if __name__ == "__main__":
    main()
