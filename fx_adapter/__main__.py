import uvicorn

from fx_adapter.core.config import get_settings


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "fx_adapter.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    run()
