"""Write the OpenAPI document of the Progress Tracker API to a file.

The application is built with placeholder database settings; the
MongoDB client is created lazily and never connects, so no database is
needed.

Usage:
    python generate_openapi.py [--output openapi.json]
"""
import argparse
import json
import sys

from progress_tracker_api.app.core.config import Settings
from progress_tracker_api.app.main import create_app


PLACEHOLDER_SETTINGS = Settings(
    mongodb_host="localhost",
    mongodb_username="openapi",
    mongodb_password="openapi",
    mongodb_database="openapi",
    log_level="WARNING",
)


def build_schema() -> dict:
    return create_app(PLACEHOLDER_SETTINGS).openapi()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--output", "-o", default="openapi.json", help="Destination file")
    args = parser.parse_args(argv)

    schema = build_schema()
    with open(args.output, "w", encoding="utf-8") as fh:
        json.dump(schema, fh, indent=2)
        fh.write("\n")
    print(f"OpenAPI schema generated at {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
