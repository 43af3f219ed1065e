"""Main entry point for the notablog CLI."""

from notablog.cli.click_app import cli


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
