"""Allow ``python -m powerpairs``."""

from .cli import main

if __name__ == "__main__":
    main()
