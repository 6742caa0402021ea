from __future__ import annotations

import argparse
import json
from pathlib import Path

from fastapi import FastAPI

from cat_registry.api.main import app as api_app


def export_openapi(app: FastAPI, destination: Path) -> None:
    """Persist the OpenAPI schema to the given destination."""
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(app.openapi(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Write the Cat Registry OpenAPI schema")
    parser.add_argument("--output", type=Path, default=Path("docs/api/openapi.json"))
    args = parser.parse_args()
    export_openapi(api_app, args.output)
    print(f"OpenAPI schema written to {args.output}")


if __name__ == "__main__":
    main()
