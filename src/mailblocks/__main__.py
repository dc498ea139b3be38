"""Entry point for 'python -m mailblocks'."""

from mailblocks.cli import main

if __name__ == "__main__":
    main()
