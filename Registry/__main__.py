"""Main entry point for the framework registry."""

from .cli import main

if __name__ == "__main__":
    main()
