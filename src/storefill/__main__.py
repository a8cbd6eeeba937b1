"""Entry point for running storefill as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the storefill CLI application."""
    app()


if __name__ == "__main__":
    main()
