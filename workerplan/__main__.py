"""Entry point for ``python -m workerplan``."""
from workerplan.cli import app

if __name__ == "__main__":
    app()
