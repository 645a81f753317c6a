"""Allow ``python -m backlogmd``."""

from backlogmd.cli.app import run


if __name__ == "__main__":
    run()
