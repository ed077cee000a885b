from agent_gateway.logging_config import setup_logging
from agent_gateway.routes import create_app
from agent_gateway.settings import settings


# Configure logging once for the whole process.
setup_logging()

# FastAPI application instance for uvicorn.
app = create_app()


def run() -> None:
    import uvicorn

    # Use our own logging configuration configured in agent_gateway.logging_config.
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
