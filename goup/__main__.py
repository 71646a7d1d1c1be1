"""
Entry point for running goup as a module.

Usage: python -m goup [command] [options]
"""

from goup.cli.parser import main

if __name__ == "__main__":
    main()
