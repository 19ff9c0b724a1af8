"""Entry point for running minish as a module."""

# The REPL in repl.py is the error boundary for the interactive loop, and
# main() in cli.py handles startup errors.

import sys

from minish.cli import main

if __name__ == "__main__":
    sys.exit(main())
