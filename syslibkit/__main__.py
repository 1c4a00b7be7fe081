"""
Entry point for ``python -m syslibkit``.
"""

from syslibkit.cli.parser import main

if __name__ == "__main__":
    main()
