"""Allow ``python -m tailbreeze``."""

from tailbreeze.cli.parser import main

if __name__ == "__main__":
    main()
