"""Allow running as ``python -m incus_compose``."""

from incus_compose.cli.main import main


if __name__ == "__main__":
    main()
