"""Module entrypoint for ``python -m prcomments``.

All argument parsing and runtime setup happen in ``prcomments.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
