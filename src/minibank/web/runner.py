"""Uvicorn server runner with custom configuration."""

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from minibank.app import App
from minibank.config import Config
from minibank.web.server import create_fastapi_app


def run_server(app: App, config: Config) -> None:
    """Serve the API with uvicorn; the database pool is opened by the app lifespan."""
    fastapi_app = create_fastapi_app(app, config)

    log_config = LOGGING_CONFIG.copy()
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"

    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=log_config,
        log_level="debug" if config.debug else "info",
        access_log=True,
        server_header=False,
    )
