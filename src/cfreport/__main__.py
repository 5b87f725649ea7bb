"""Allow ``python -m cfreport``."""

from cfreport.cli import main

main()
