# cli.py
import click

from uploads_api.config.settings import get_settings


@click.group()
def cli():
    """CLI commands for the Uploads API"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    click.echo("Current Configuration:")
    for name, value in settings.describe().items():
        click.echo(f"  {name}: {value}")


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST setting)")
@click.option("--port", type=int, default=None, help="Port to bind (defaults to PORT setting)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host, port, reload):
    """Run the API with uvicorn"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "uploads_api.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    cli()
