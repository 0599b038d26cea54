"""Allow ``python -m tubeweb``."""

from tubeweb.cli.main import main

if __name__ == "__main__":
    main()
