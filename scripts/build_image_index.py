#!/usr/bin/env python3
"""
Build images.json from the product photos in the catalog repository.

The output is imported into the catalog database's `images` node.

Usage:
    python scripts/build_image_index.py
    python scripts/build_image_index.py --folders cuadros rotulos -o images.json
"""
import argparse
import json
import os
import sys
from pathlib import Path

import httpx
from dotenv import load_dotenv

from storefront.services.image_index import DEFAULT_FOLDERS, build_image_index

load_dotenv(Path(__file__).parent.parent / ".env", override=False)


def main() -> int:
    parser = argparse.ArgumentParser(description="Build images.json from the catalog repository")
    parser.add_argument("--owner", default=os.environ.get("CATALOG_REPO_OWNER", "valevasqc"))
    parser.add_argument("--repo", default=os.environ.get("CATALOG_REPO", "xepi2024"))
    parser.add_argument("--branch", default="main")
    parser.add_argument("--folders", nargs="+", default=list(DEFAULT_FOLDERS))
    parser.add_argument("-o", "--output", default="images.json")
    args = parser.parse_args()

    headers = {"Accept": "application/vnd.github+json"}
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    try:
        with httpx.Client(headers=headers, timeout=15.0) as client:
            index = build_image_index(client, args.owner, args.repo, args.folders, args.branch)
    except (httpx.HTTPError, ValueError) as e:
        print(f"Error fetching images: {e}", file=sys.stderr)
        return 1

    Path(args.output).write_text(json.dumps(index, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"{args.output} has been created successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
