"""CLI application for Azure container groups, container apps and jobs."""

import typer

from azcops.cli.commands.apps import app as apps_app
from azcops.cli.commands.connect import connect
from azcops.cli.commands.envs import app as envs_app
from azcops.cli.commands.fragments import app as fragments_app
from azcops.cli.commands.groups import app as groups_app
from azcops.cli.commands.jobs import app as jobs_app
from azcops.cli.common.log import setup_logging

app = typer.Typer(
    help="azcops - Azure container groups, container apps and jobs",
    no_args_is_help=True,
)


@app.callback()
def _main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show diagnostic logging"
    ),
):
    """Configure logging before any command runs."""
    setup_logging(verbose)


app.command("connect")(connect)
app.add_typer(envs_app, name="env")
app.add_typer(apps_app, name="app", help="Get / create / remove container apps.")
app.add_typer(jobs_app, name="job", help="Get / create / start / remove jobs.")
app.add_typer(groups_app, name="group", help="Get / create / remove container groups.")
app.add_typer(fragments_app, name="fragment")


if __name__ == "__main__":
    app()
