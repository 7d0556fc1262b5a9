"""Application entry point for the Delta Iota backend server."""

from deltaiota.app import App
from deltaiota.config import Config
from deltaiota.logging import setup_logging
from deltaiota.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
