import typer

from buildview.cli.call import call, services
from buildview.cli.serve import serve_app

app = typer.Typer(
    name="buildview",
    help="Call and serve the buildview v3 read API.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("call")(call)
app.command("services")(services)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
