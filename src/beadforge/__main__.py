"""Allow ``python -m beadforge``."""

from beadforge.cli import main

if __name__ == "__main__":
    main()
