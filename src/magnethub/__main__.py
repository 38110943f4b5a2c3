"""Allow running as python -m magnethub."""

from .cli import main

if __name__ == "__main__":
    main()
