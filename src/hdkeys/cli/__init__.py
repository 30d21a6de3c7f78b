"""
hdkeys CLI package.

Commands are organized into submodules and registered via ``@app.command()``
decorators that reference the ``app`` Typer instance defined here.
"""

from __future__ import annotations

import typer

app = typer.Typer(
    name="hdkeys",
    help="BIP32/BIP39/BIP44 hierarchical deterministic key tool",
    add_completion=False,
)


def main() -> None:
    """Entry point for the ``hdkeys`` console script."""
    app()


# ---------------------------------------------------------------------------
# Import submodules to register their ``@app.command()`` decorated functions.
# These imports MUST come after ``app`` is defined above.
# ---------------------------------------------------------------------------
from hdkeys.cli import accounts, config, keys, mnemonic  # noqa: E402, F401

if __name__ == "__main__":
    main()
