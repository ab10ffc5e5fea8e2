"""Typer-based CLI for one-off image generation.

Usage:
    imagestudio "a red fox in the snow" --aspect-ratio 16:9 --out ./images
"""

import uuid
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from imagestudio.coordinator.orchestrator import generate
from imagestudio.core.errors import ImageStudioError
from imagestudio.core.image_utils import check_stem, save_data_uri
from imagestudio.gemini.models import GenerationRequest

app = typer.Typer(
    name="imagestudio",
    help="Generate an image from a text prompt with the configured Gemini model",
    add_completion=False,
)


class AspectRatioChoice(str, Enum):
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"


@app.command()
def generate_image(
    prompt: Annotated[str, typer.Argument(help="Text prompt describing the image")],
    aspect_ratio: Annotated[
        AspectRatioChoice, typer.Option(help="Aspect-ratio hint")
    ] = AspectRatioChoice.SQUARE,
    out: Annotated[
        Path | None, typer.Option(help="Output directory (default: <data>/generated)")
    ] = None,
    name: Annotated[
        str | None, typer.Option(help="Output file stem, no directories (default: random)")
    ] = None,
) -> None:
    """Run one generation, save the image and print its path."""
    try:
        request = GenerationRequest(prompt=prompt, aspect_ratio=aspect_ratio.value)
    except ValidationError as e:
        typer.echo("Error: prompt cannot be empty", err=True)
        raise typer.Exit(2) from e

    if name is not None:
        try:
            check_stem(name)
        except ValueError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(2) from e

    try:
        result = generate(request)
    except ImageStudioError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    stem = name or f"img_{uuid.uuid4().hex[:12]}"
    try:
        path = save_data_uri(result.image_url, stem, out_dir=out)
    except (ValueError, OSError) as e:
        typer.echo(f"Error: generated image could not be saved: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(str(path))


def main():
    """Entry point for the imagestudio console script."""
    app()


if __name__ == "__main__":
    main()
