"""Allow running the CLI as ``python -m incus_compose.cli``."""

from incus_compose.cli.main import main


if __name__ == "__main__":
    main()
