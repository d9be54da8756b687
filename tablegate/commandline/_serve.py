from pathlib import Path
from typing import Optional

import typer

serve_app = typer.Typer(no_args_is_help=True)

HOST_HELP = (
    "Bind socket to this host. Use `--host 0.0.0.0` to make the application "
    "available on your local network. IPv6 addresses are supported, for "
    "example: --host `'::'`."
)


@serve_app.command("pyobject")
def serve_pyobject(
    object_path: str = typer.Argument(
        ..., help="Object path, as in 'package.subpackage.module:object_name'"
    ),
    host: str = typer.Option("127.0.0.1", help=HOST_HELP),
    port: int = typer.Option(8000, help="Bind to a socket with this port."),
    request_bytesize_limit: Optional[int] = typer.Option(
        None,
        "--request-bytesize-limit",
        help="Reject request bodies larger than this many bytes.",
    ),
    log_config: Optional[str] = typer.Option(
        None, help="Custom uvicorn logging configuration file"
    ),
    log_timestamps: bool = typer.Option(
        False, help="Include timestamps in log output."
    ),
):
    "Serve an administration client from a Python module."
    from ..server.app import build_app, print_server_info
    from ..utils import import_object

    admin = import_object(object_path)
    web_app = build_app(admin, {"request_bytesize_limit": request_bytesize_limit})
    print_server_info(web_app, host=host, port=port)

    import uvicorn

    log_config = _setup_log_config(log_config, log_timestamps)
    uvicorn.run(web_app, host=host, port=port, log_config=log_config)


@serve_app.command("demo")
def serve_demo(
    host: str = typer.Option("127.0.0.1", help=HOST_HELP),
    port: int = typer.Option(8000, help="Bind to a socket with this port."),
):
    "Start a server administering example tables held in memory."
    from ..server.app import build_app, print_server_info
    from ..utils import import_object

    EXAMPLE = "tablegate.examples.generated:admin"
    admin = import_object(EXAMPLE)
    web_app = build_app(admin)
    print_server_info(web_app, host=host, port=port)

    import uvicorn

    uvicorn.run(web_app, host=host, port=port)


@serve_app.command("config")
def serve_config(
    config_path: Optional[Path] = typer.Argument(
        None,
        help=(
            "Path to a config file or directory of config files. "
            "If None, check environment variable TABLEGATE_CONFIG. "
            "If that is unset, try default location ./config.yml."
        ),
    ),
    host: Optional[str] = typer.Option(
        None, help=HOST_HELP + " Uses value in config by default."
    ),
    port: Optional[int] = typer.Option(
        None, help="Bind to a socket with this port. Uses value in config by default."
    ),
    log_config: Optional[str] = typer.Option(
        None, help="Custom uvicorn logging configuration file"
    ),
    log_timestamps: bool = typer.Option(
        False, help="Include timestamps in log output."
    ),
):
    "Serve an administration client as specified in configuration file(s)."
    import os

    from ..config import parse_configs

    config_path = config_path or os.getenv("TABLEGATE_CONFIG", "config.yml")
    try:
        parsed_config = parse_configs(config_path)
    except Exception as err:
        typer.echo(str(err), err=True)
        raise typer.Abort()

    # Delay this import so that we can fail faster if config-parsing fails above.

    from ..server.app import build_app_from_config, logger, print_server_info

    # Extract config for uvicorn.
    uvicorn_kwargs = dict(parsed_config.uvicorn)
    # If --host is given, it overrides host in config. Same for --port and --log-config.
    uvicorn_kwargs["host"] = host or uvicorn_kwargs.get("host", "127.0.0.1")
    if port is None:
        port = uvicorn_kwargs.get("port", 8000)
    uvicorn_kwargs["port"] = port
    uvicorn_kwargs["log_config"] = _setup_log_config(
        log_config or uvicorn_kwargs.get("log_config"),
        log_timestamps,
    )

    logger.info(f"Using configuration from {Path(config_path).absolute()}")

    # This config was already validated when it was parsed. Do not re-validate.
    web_app = build_app_from_config(parsed_config, source_filepath=config_path)
    print_server_info(
        web_app,
        host=uvicorn_kwargs["host"],
        port=uvicorn_kwargs["port"],
    )

    # Likewise, delay this import.

    import uvicorn

    uvicorn.run(web_app, **uvicorn_kwargs)


def _setup_log_config(log_config, log_timestamps):
    if log_config is None:
        from ..server.logging_config import LOGGING_CONFIG

        log_config = LOGGING_CONFIG

    if log_timestamps:
        import copy

        log_config = copy.deepcopy(log_config)
        try:
            for formatter in ("access", "default"):
                log_config["formatters"][formatter]["format"] = (
                    "[%(asctime)s.%(msecs)03dZ] "
                    + log_config["formatters"][formatter]["format"]
                )
        except (KeyError, TypeError):
            typer.echo(
                "The --log-timestamps option is only applicable with a logging "
                "configuration that, like the default logging configuration, has "
                "formatters 'access' and 'default'.",
                err=True,
            )
            raise typer.Abort()
    return log_config
