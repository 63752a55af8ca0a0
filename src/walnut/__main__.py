"""Allow ``python -m walnut``."""

from walnut.cli import main

if __name__ == "__main__":
    main()
