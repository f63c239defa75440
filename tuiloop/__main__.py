"""Module entrypoint for ``python -m tuiloop``.

All argument parsing happens in ``tuiloop.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
