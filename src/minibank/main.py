"""Application entry point for MiniBank backend server."""

import sys

from pydantic import ValidationError

from minibank.app import App
from minibank.config import Config
from minibank.logging import setup_logging
from minibank.web.runner import run_server


def main() -> None:
    try:
        config = Config()  # type: ignore[call-arg]
    except ValidationError as e:
        # No insecure fallbacks: a missing or weak secret stops the process here
        problems = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        sys.exit(f"Invalid configuration: {problems}")
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
