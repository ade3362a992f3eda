"""Allow ``python -m vibe_slides``."""
from .cli import main

if __name__ == "__main__":
    main()
