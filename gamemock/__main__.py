"""
gamemock server entry point

    python -m gamemock
"""
import uvicorn

from gamemock.config.loader import get_settings


def main():
    """Serve the mock on the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        "gamemock.main:app",
        host=settings.listen_host,
        port=settings.listen_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
