"""Command line entry point: key generation and the API server."""

import secrets

import typer
import uvicorn
from rich.console import Console

app = typer.Typer(
    name="tunebox",
    help="Tunebox authentication service",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Manage token signing keys",
    no_args_is_help=True,
)
app.add_typer(secrets_app)


SECRET_NAMES = ("JWT_ACCESS_SECRET_KEY", "JWT_REFRESH_SECRET_KEY")


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Print fresh access and refresh signing keys as ``NAME=value`` lines."""
    console.print("\n[bold green]Tunebox signing keys[/bold green]\n")
    # token_urlsafe(64) never repeats in practice, so the keys differ
    for name in SECRET_NAMES:
        console.print(f"[cyan]{name}[/cyan]={secrets.token_urlsafe(64)}", soft_wrap=True)
    console.print(
        "\n[dim]Paste these into config/.env (or config/.env.dev) and keep "
        "them out of git.[/dim]\n"
    )


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind address (default: API_HOST)"),
    port: int | None = typer.Option(None, help="Bind port (default: API_PORT)"),
    reload: bool = typer.Option(False, help="Reload on source changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    from tunebox_config.settings import get_settings

    settings = get_settings()
    bind_host = host or settings.api_host
    bind_port = port or settings.api_port

    console.print(
        f"[bold green]Starting Tunebox API[/bold green] on "
        f"[cyan]http://{bind_host}:{bind_port}[/cyan]"
    )
    uvicorn.run(
        "tunebox.presentation.api.app:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


def cli() -> None:
    """Console script hook."""
    app()


if __name__ == "__main__":
    cli()
