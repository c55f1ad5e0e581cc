"""CLI main entry point using Typer."""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from inkpress import __version__
from inkpress.config.settings import (
    DEFAULT_CONTENT_DIR,
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    get_default_render_config,
    get_default_server_config,
)
from inkpress.content.repository import ContentError, parse_front_matter
from inkpress.renderer.engine import MarkdownRenderer
from inkpress.renderer.highlighter import RendererError, get_highlighter

app = typer.Typer(
    name="inkpress",
    help="Markdown rendering and read API for a personal blog",
    add_completion=False,
)

console = Console()


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_markdown(path: Path) -> str:
    """Read an article file and drop its front matter."""
    if not path.is_file():
        console.print(f"[red]✗[/red] File not found: {path}", style="bold")
        raise typer.Exit(code=3)
    _, body = parse_front_matter(path.read_text(encoding="utf-8"))
    return body


def _build_renderer() -> MarkdownRenderer:
    return MarkdownRenderer(get_highlighter(), get_default_render_config())


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"inkpress v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Markdown rendering and read API for a personal blog."""


@app.command()
def serve(
    content_dir: Path = typer.Argument(
        DEFAULT_CONTENT_DIR,
        help="Directory of Markdown articles to serve",
    ),
    port: int = typer.Option(
        DEFAULT_PORT,
        "--port",
        "-p",
        help="Port to bind server (1024-65535)",
        min=1024,
        max=65535,
    ),
    host: str = typer.Option(
        DEFAULT_HOST,
        "--host",
        "-h",
        help="Host to bind server",
    ),
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        "--log",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
    ),
) -> None:
    """Start the blog content API server."""
    if not content_dir.exists():
        console.print(f"[red]✗[/red] Path not found: {content_dir}", style="bold")
        raise typer.Exit(code=3)

    config = get_default_server_config(content_dir.absolute())
    config.host = host
    config.port = port
    config.log_level = log_level

    try:
        config.validate()
    except ValueError as e:
        console.print(f"[red]✗[/red] Configuration error: {e}", style="bold")
        raise typer.Exit(code=2)

    _configure_logging(config.log_level)
    console.print(f"\n[bold blue]inkpress[/bold blue] v{__version__}\n")
    console.print(f"[green]✓[/green] Content: {config.content_path}")
    console.print(f"[green]✓[/green] API: http://{host}:{port}/api/articles\n")

    try:
        from inkpress.server.app import create_app

        uvicorn.run(
            create_app(config),
            host=host,
            port=port,
            log_level=log_level.lower(),
        )
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
    except OSError as e:
        if "address already in use" in str(e).lower():
            console.print(f"[red]✗[/red] Port {port} is already in use", style="bold")
            raise typer.Exit(code=5)
        console.print(f"[red]✗[/red] Error: {e}", style="bold")
        raise typer.Exit(code=1)


@app.command()
def render(
    source: Path = typer.Argument(
        ...,
        help="Markdown file to render",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write HTML to this file instead of stdout",
    ),
    toc_json: bool = typer.Option(
        False,
        "--toc-json",
        help="Emit {htmlContent, toc} as JSON",
    ),
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG/INFO/WARNING/ERROR)",
    ),
) -> None:
    """Render a Markdown article to HTML."""
    _configure_logging(log_level)
    try:
        content = _read_markdown(source)
        document = _build_renderer().render_document(content)
    except ContentError as e:
        console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(code=2)
    except RendererError as e:
        console.print(f"[red]✗[/red] Renderer unavailable: {e}", style="bold")
        raise typer.Exit(code=1)

    result = json.dumps(document.to_dict(), ensure_ascii=False, indent=2) if toc_json else document.html

    if output is None:
        typer.echo(result)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {output}")


@app.command()
def toc(
    source: Path = typer.Argument(
        ...,
        help="Markdown file to outline",
    ),
) -> None:
    """Print the table of contents of a Markdown article."""
    _configure_logging("WARNING")
    try:
        content = _read_markdown(source)
        entries = _build_renderer().extract_toc(content)
    except ContentError as e:
        console.print(f"[red]✗[/red] {e}", style="bold")
        raise typer.Exit(code=2)
    except RendererError as e:
        console.print(f"[red]✗[/red] Renderer unavailable: {e}", style="bold")
        raise typer.Exit(code=1)

    if not entries:
        console.print("[yellow]No headings found[/yellow]")
        return

    root = Tree(f"[bold]{source.name}[/bold]")
    # Stack of (level, node) so deeper headings nest under the nearest shallower one
    stack: list[tuple[int, Tree]] = [(0, root)]
    for entry in entries:
        while stack[-1][0] >= entry.level:
            stack.pop()
        node = stack[-1][1].add(f"{escape(entry.text)} [dim]#{escape(entry.id)}[/dim]")
        stack.append((entry.level, node))
    console.print(root)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
