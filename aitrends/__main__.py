"""Module entrypoint for `python -m aitrends`.

This module enables running aitrends as a Python module using `python -m aitrends`.
It forwards to the same main() function as the console script.

Usage:
    ```bash
    python -m aitrends fetch --source github --format md
    python -m aitrends serve --port 8000
    ```
"""
import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
