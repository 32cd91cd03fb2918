"""Entry point for the Hyperliquid trade agent.

Wires settings, logging and capabilities together, then serves the tool
invocation surface with uvicorn on a single asyncio event loop.

Env:
    OPENSERV_API_KEY      (required) key for the OpenServ secrets API
    PORT                  (optional, defaults to 7380)
    HYPERLIQUID_TESTNET   (optional, "true" for testnet)
    LOG_LEVEL / LOG_FORMAT

Trading credentials are NOT configured here: each trade names the workspace
secrets holding its private key (and optional vault address).
"""

import asyncio

import uvicorn

from trade_agent.api.app import create_app
from trade_agent.capabilities import get_all_capabilities
from trade_agent.config import AppSettings
from trade_agent.logging import get_logger, mask_secret, setup_logging


async def run() -> None:
    """Run the agent server until interrupted."""
    # 1. Load settings
    settings = AppSettings()

    # 2. Setup logging
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("trade_agent.main")

    api_key = settings.openserv.api_key.get_secret_value()
    if not api_key:
        logger.critical("openserv_api_key_missing", note="set OPENSERV_API_KEY in your environment")
        raise SystemExit(1)

    # 3. Register capabilities
    capabilities = get_all_capabilities(settings)
    for capability in capabilities:
        logger.info("registered_capability", capability=capability.name)

    app = create_app(capabilities)

    logger.info(
        "starting_trade_agent",
        host=settings.host,
        port=settings.port,
        openserv_api_key=mask_secret(api_key, head=8, tail=0),
        openserv_api_url=settings.openserv.api_url,
        network="testnet" if settings.hyperliquid.testnet else "mainnet",
        capabilities=[capability.name for capability in capabilities],
    )

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()

    logger.info("trade_agent_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
