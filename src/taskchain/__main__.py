"""Allow ``python -m taskchain``."""

from taskchain.cli import main

main()
