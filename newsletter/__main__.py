# newsletter/__main__.py
import argparse
import os

import uvicorn

from newsletter.config import load_settings
from newsletter.main import create_app


def existing_file(path: str) -> str:
    if not os.path.isfile(path):
        raise argparse.ArgumentTypeError(f"File not found: {path}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Newsletter API server")
    parser.add_argument(
        "-c", "--config",
        type=existing_file,
        help="Path to an env file with the server settings"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    conf = load_settings(args.config)

    uvicorn.run(
        create_app(conf),
        host=conf.application.host,
        port=conf.application.port,
        log_config=None
    )


if __name__ == "__main__":
    main()
