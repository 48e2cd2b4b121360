"""Module entry point for `python -m plsync.cli`."""

if __name__ == "__main__":  # pragma: no cover (invocation driven)
    from plsync.cli import cli

    cli()
