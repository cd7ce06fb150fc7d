"""Allow ``python -m gh_container``."""

from .cli import run

if __name__ == "__main__":
    run()
