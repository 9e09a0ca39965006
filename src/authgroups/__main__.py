"""Entry point for 'python -m authgroups'."""

from authgroups.cli import main

if __name__ == "__main__":
    main()
