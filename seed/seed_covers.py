#!/usr/bin/env python3
"""
Seed script that uploads local images as covers and gallery images via the API.

Run:
    python seed/seed_covers.py \
      --base-url http://localhost:3000 \
      --images-dir seed/images \
      --owner-id demo_book
"""

import argparse
import base64
import sys
from pathlib import Path
from typing import Any, cast

import requests
from aws_lambda_powertools import Logger

logger = Logger(service="seed")

COVER_PATH = "/v1/{entity}/{owner_id}/cover"
GALLERY_PATH = "/v1/{entity}/{owner_id}/images"
IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp", ".gif")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed covers and gallery images")

    parser.add_argument(
        "--base-url",
        required=True,
        help="API base URL (e.g. a local API Gateway emulator)",
    )
    parser.add_argument(
        "--images-dir",
        type=Path,
        default=Path(__file__).parent / "images",
        help="Directory holding the source images",
    )
    parser.add_argument(
        "--owner-id",
        default="seed_book",
        help="Owner the uploaded images are attached to",
    )
    parser.add_argument(
        "--entity",
        default="books",
        help="Entity type segment of the upload routes",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="API key for x-api-key header (optional for local)",
    )

    return parser.parse_args()


def encode_file(path: Path) -> dict[str, str]:
    return {
        "file": base64.b64encode(path.read_bytes()).decode("utf-8"),
        "file_name": path.name,
    }


def seed_covers() -> None:
    try:
        args = parse_args()

        images = sorted(
            p for p in args.images_dir.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES
        )
        if not images:
            logger.warning("No images to seed", extra={"dir": str(args.images_dir)})
            return

        headers: dict[str, str] = {"Content-Type": "application/json"}
        if args.api_key:
            headers["x-api-key"] = args.api_key

        base_url = args.base_url.rstrip("/")
        route_params = {"entity": args.entity, "owner_id": args.owner_id}
        cover_url = base_url + COVER_PATH.format(**route_params)
        gallery_url = base_url + GALLERY_PATH.format(**route_params)

        logger.info(
            "Starting seeding process",
            extra={"cover_url": cover_url, "images": len(images)},
        )

        # the first image becomes the cover; each later one replaces it
        previous_cover: str | None = None
        for image_path in images[:2]:
            payload: dict[str, Any] = encode_file(image_path)
            if previous_cover:
                payload["previous_cover"] = previous_cover

            response = requests.post(cover_url, headers=headers, json=payload, timeout=60)
            body = cast(dict[str, Any], response.json())

            if response.status_code == 201:
                previous_cover = body.get("cover_image")
                logger.info(
                    "Seeded cover",
                    extra={
                        "image": image_path.name,
                        "cover_image": previous_cover,
                        "compression_ratio": body.get("compression_ratio"),
                    },
                )
            else:
                logger.error(
                    "Failed to seed cover",
                    extra={
                        "image": image_path.name,
                        "status": response.status_code,
                        "response": body,
                    },
                )

        gallery_response = requests.post(
            gallery_url,
            headers=headers,
            json={"files": [encode_file(p) for p in images[:10]]},
            timeout=120,
        )
        gallery_body = cast(dict[str, Any], gallery_response.json())

        logger.info(
            "Gallery upload response",
            extra={
                "status": gallery_response.status_code,
                "processed": gallery_body.get("processed"),
                "errors": gallery_body.get("errors"),
            },
        )

        logger.info("Seeding completed")

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_covers()
