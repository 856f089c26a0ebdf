#!/usr/bin/env python3
"""Generate a stock-photo title and keywords for a local image file.

Usage:
  GEMINI_API_KEY=... python bin/generate_metadata.py \
    --image path/to/photo.jpg [--model gemini-2.0-flash]

Prints the title on the first line and the keywords on the second.
"""
from __future__ import annotations

import argparse
import asyncio
import mimetypes
from pathlib import Path


def main() -> int:
    ap = argparse.ArgumentParser(description="Generate stock-photo title and keywords")
    ap.add_argument("--image", required=True, help="Path to the image file")
    ap.add_argument("--model", default=None, help="Gemini model name override")
    args = ap.parse_args()

    from stockmeta.core.config import Settings
    from stockmeta.services.generation import ContentGenerationWorkflow
    from stockmeta.services.images import EncodedImage, InvalidImageError

    path = Path(args.image)
    try:
        image = EncodedImage.from_bytes(
            path.read_bytes(), mimetypes.guess_type(path.name)[0]
        )
    except (OSError, InvalidImageError) as exc:
        print("ERROR:", exc)
        return 2

    overrides = {"gemini_model": args.model} if args.model else {}
    settings = Settings(**overrides)
    result = asyncio.run(ContentGenerationWorkflow(settings).generate(image))

    print("Title:", result.title)
    print("Keywords:", result.keywords)
    if result.error:
        print("ERROR:", result.error)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
