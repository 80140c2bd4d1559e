import typer
import logging
from workerplan.commands import plan
from workerplan.config import Config
from workerplan.logging import setup_logger

app = typer.Typer()


def setup_logging(debug_mode: bool = False):
    """Configure logging based on debug mode."""
    log_level = logging.DEBUG if debug_mode else getattr(logging, Config.LOG_LEVEL, logging.INFO)
    for name in ("upgrader", "plan"):
        setup_logger(name, log_level)
    # Disable debug logging for noisy libraries
    if not debug_mode:
        logging.getLogger('kubernetes').setLevel(logging.WARNING)
        logging.getLogger('urllib3').setLevel(logging.WARNING)


app.add_typer(plan.app, name="plan")


@app.command("serve")
def serve(
    host: str = typer.Option(Config.API_HOST, help="Address to bind"),
    port: int = typer.Option(Config.API_PORT, help="Port to listen on"),
):
    """Serve the plan comparison API."""
    try:
        Config.validate()
    except ValueError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)

    import uvicorn

    uvicorn.run("workerplan.api.main:app", host=host, port=port)


# Global options callback
@app.callback()
def main(
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """WorkerPlan - node plan builder and change detector."""
    setup_logging(debug)
    if debug:
        logging.getLogger("upgrader").debug("Debug mode enabled")

