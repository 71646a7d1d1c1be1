"""
Entry point for running goup CLI as a module.

Usage: python -m goup.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
