"""Allow ``python -m gsbuild``."""

from gsbuild.cli.app import main

if __name__ == "__main__":
    main()
