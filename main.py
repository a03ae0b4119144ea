"""
VisaGate entry point
Serves the visa eligibility and visa options endpoints over HTTP
"""

import uvicorn
from loguru import logger

from visagate.api.server import create_app
from visagate.settings import global_settings


def main() -> None:
    """Run the HTTP server"""
    logger.info(
        f"Starting VisaGate on {global_settings.host}:{global_settings.port}..."
    )
    uvicorn.run(
        create_app(global_settings),
        host=global_settings.host,
        port=global_settings.port,
    )


if __name__ == "__main__":
    main()
