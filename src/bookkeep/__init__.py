"""bookkeep: ledger core for small-business accounting."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI imports the whole database layer; only load it when asked for.
    if name == "main":
        from bookkeep.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
