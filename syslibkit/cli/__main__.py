"""
Entry point for running SysLibKit CLI as a module.

Usage: python -m syslibkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
