"""Main entry point for the configuration loader CLI."""

from wheatconf.cli import main

if __name__ == "__main__":
    main()
