"""FastAPI application serving importer sessions."""
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csv_importer.api import api_router
from csv_importer.config.settings import Settings, get_settings
from csv_importer.logging_config import configure_logging
from csv_importer.middleware import RequestLoggingMiddleware


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.log_json)

    app = FastAPI(title="CSV Importer")
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.uvicorn_host, port=settings.uvicorn_port)


if __name__ == "__main__":
    run()
