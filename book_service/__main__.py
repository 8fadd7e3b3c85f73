"""Entry point for ``python -m book_service``."""

from .app import main

main()
