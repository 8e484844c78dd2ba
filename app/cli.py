from __future__ import annotations

import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from adapters.drawio.repository import FileSystemDrawioRepository
from adapters.filesystem.architecture_repository import FileSystemArchitectureRepository
from app.config import AppSettings, load_settings
from app.drawio_wiring import build_converter
from domain.catalog import list_resources
from domain.errors import DiagramError

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", help="YAML settings file (defaults to $AZARCH_CONFIG_PATH or config/app.yaml)."
    ),
) -> None:
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValidationError) as exc:
        console.print(f"[red]Invalid configuration:[/] {exc}")
        raise typer.Exit(code=1) from exc
    logging.basicConfig(level=settings.generator.log_level)
    ctx.obj = settings


@app.command("generate")
def generate_all(
    ctx: typer.Context,
    input_dir: Path | None = typer.Option(None, help="Directory with architecture JSON files."),
    output_dir: Path | None = typer.Option(None, help="Directory to write .drawio files."),
) -> None:
    settings: AppSettings = ctx.obj
    source_dir = input_dir or settings.generator.input_dir
    target_dir = output_dir or settings.generator.output_dir
    architectures = FileSystemArchitectureRepository()
    drawio = FileSystemDrawioRepository()
    converter = build_converter(settings.generator)

    try:
        pairs = architectures.load_all_with_paths(source_dir)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Failed to load architectures:[/] {exc}")
        raise typer.Exit(code=1) from exc
    if not pairs:
        console.print(f"[yellow]No architecture files found in {source_dir}[/]")
        raise typer.Exit(code=0)

    for path, architecture in pairs:
        target_path = drawio.output_path(path, target_dir)
        try:
            drawio.save(converter.convert(architecture), target_path)
        except (OSError, DiagramError) as exc:
            console.print(f"[red]Failed to render {path}:[/] {exc}")
            raise typer.Exit(code=1) from exc
        console.print(f"[green]Wrote[/] {target_path}")


@app.command("render")
def render(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., help="Architecture JSON file."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Target .drawio file."),
) -> None:
    settings: AppSettings = ctx.obj
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        architecture = FileSystemArchitectureRepository().load_by_path(input_path)
        document = build_converter(settings.generator).convert(architecture)
    except (ValueError, DiagramError) as exc:
        console.print(f"[red]Render failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    drawio = FileSystemDrawioRepository()
    target_path = output or drawio.output_path(input_path, settings.generator.output_dir)
    try:
        drawio.save(document, target_path)
    except OSError as exc:
        console.print(f"[red]Render failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"[green]Wrote[/] {target_path} ({len(document.pages)} page(s))")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="Architecture JSON file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        architecture = FileSystemArchitectureRepository().load_by_path(input_path)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    pages = len(architecture.page_architectures())
    console.print(f"[green]Valid architecture file:[/] {input_path} ({pages} page(s))")


@app.command("resources")
def resources() -> None:
    table = Table(title="Resource types")
    table.add_column("Type")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Size", justify="right")
    for resource_type, definition in list_resources():
        table.add_row(
            resource_type,
            definition.display_name,
            definition.category,
            f"{definition.width}x{definition.height}",
        )
    console.print(table)


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, help="Bind address (defaults to web.host)."),
    port: int | None = typer.Option(None, help="Bind port (defaults to web.port)."),
) -> None:
    import uvicorn

    from app.web_main import create_app

    settings: AppSettings = ctx.obj
    uvicorn.run(
        create_app(settings),
        host=host or settings.web.host,
        port=port or settings.web.port,
        log_level=settings.generator.log_level.lower(),
    )


if __name__ == "__main__":
    app()
