import logging
import platform
import sys
from importlib import metadata
from pathlib import Path
from typing import Annotated

import typer
from google.protobuf import json_format
from rich.console import Console

from protoyaml.decoder import Decoder
from protoyaml.errors import DecodeError
from protoyaml.resolver import DescriptorPoolResolver, message_class
from protoyaml.settings import protoyaml_settings

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")


@app.command()
def decode(
    descriptor_set: Annotated[
        Path,
        typer.Argument(
            help=(
                "Serialized FileDescriptorSet, as written by "
                "`protoc --descriptor_set_out=... --include_imports`."
            ),
            exists=True,
            dir_okay=False,
        ),
    ],
    message_type: Annotated[
        str,
        typer.Argument(help="Full name of the message type, e.g. my.pkg.Config."),
    ],
    input_file: Annotated[
        Path | None,
        typer.Argument(help="YAML input. Reads stdin when omitted.", dir_okay=False),
    ] = None,
) -> None:
    """Decode every YAML document of the input and print it as JSON."""
    logging.basicConfig(level=protoyaml_settings.log_level)

    resolver = DescriptorPoolResolver.from_descriptor_set(descriptor_set)
    try:
        descriptor = resolver.pool.FindMessageTypeByName(message_type)
    except KeyError:
        err_console.print(f"Unknown message type: {message_type}", style="red", markup=False)
        raise typer.Exit(code=1)

    if input_file is not None:
        stream = input_file.read_text(encoding="utf-8")
    else:
        stream = sys.stdin.read()

    decoder = Decoder(stream, resolver=resolver)
    try:
        for message in decoder.iter_decode(message_class(descriptor)):
            console.print_json(
                json_format.MessageToJson(
                    message,
                    preserving_proto_field_name=True,
                    descriptor_pool=resolver.pool,
                )
            )
    except DecodeError as exc:
        err_console.print(str(exc), style="red", markup=False)
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    console.print(f"protoyaml: {metadata.version('protoyaml')}")
    console.print(
        f"Python: {platform.python_version()} ({sys.implementation.cache_tag})"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
