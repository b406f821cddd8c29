"""Allow ``python -m gel_autocrop``."""

from .cli import main

if __name__ == "__main__":
    main()
