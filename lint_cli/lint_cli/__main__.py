"""Entry point for `python -m lint_cli` and the `sqllint` console script."""

from __future__ import annotations

from lint_cli.app import app


def main() -> None:
    app()


if __name__ == "__main__":
    main()
