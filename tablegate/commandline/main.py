try:
    import typer
except Exception as err:
    raise Exception(
        """
You are trying to the run the tablegate commandline tool but you do not have
the necessary dependencies. Try reinstalling with

    pip install --force-reinstall tablegate

which installs the web server and commandline dependencies.
"""
    ) from err


cli_app = typer.Typer(no_args_is_help=True)

from ._serve import serve_app  # noqa: E402

cli_app.add_typer(
    serve_app, name="serve", help="Launch a table administration server."
)


@cli_app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", help="Show version and exit."
    ),
):
    if version:
        from .. import __version__

        typer.echo(f"{__version__}")


main = cli_app


if __name__ == "__main__":
    main()
