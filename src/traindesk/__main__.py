"""Allow ``python -m traindesk``."""

from traindesk.cli import main

if __name__ == "__main__":
    main()
