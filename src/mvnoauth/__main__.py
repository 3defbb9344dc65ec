"""Allow ``python -m mvnoauth``."""

from mvnoauth.app import main

main()
