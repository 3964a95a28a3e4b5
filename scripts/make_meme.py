"""Generate one meme from a local photo without running the API."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Iterable

from magic_meme.media.client import get_generation_client
from magic_meme.media.prompts import DEFAULT_INTENSITY, DEFAULT_STYLE, MemeStyle
from magic_meme.media.service import MemeGenerationResult, create_meme, export_meme, prepare_source_image


async def run_generation(
    *,
    image_path: Path,
    style: str,
    intensity: int,
    caption: str,
    description: str,
) -> MemeGenerationResult:
    cropped = prepare_source_image(image_path)
    return await create_meme(
        get_generation_client(),
        cropped,
        style=style,
        intensity=intensity,
        caption=caption,
        description=description,
    )


def _format_report(result: MemeGenerationResult, output: Path | None) -> Iterable[str]:
    yield f"status={result.status}"
    yield f"message={result.message}"
    if result.mime_type:
        yield f"mime_type={result.mime_type}"
    if output is not None:
        yield f"output={output}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Turn a photo into a stylized meme.")
    parser.add_argument("image", type=Path)
    parser.add_argument("--style", default=DEFAULT_STYLE.value, choices=[style.value for style in MemeStyle])
    parser.add_argument("--intensity", type=int, default=DEFAULT_INTENSITY)
    parser.add_argument("--caption", default="")
    parser.add_argument("--description", default="")
    parser.add_argument("--output", type=Path, default=Path("meme.png"))
    args = parser.parse_args()

    if not 0 <= args.intensity <= 100:
        parser.error("--intensity must be between 0 and 100")

    result = asyncio.run(
        run_generation(
            image_path=args.image,
            style=args.style,
            intensity=args.intensity,
            caption=args.caption,
            description=args.description,
        )
    )
    output = export_meme(result.image, args.output) if result.success and result.image else None
    for line in _format_report(result, output):
        print(line)
    if not result.success:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
