"""Application entry point.

Usage:
    # Development with auto-reload
    uvicorn label_analyzer.main:app --reload
"""

from label_analyzer.factory import create_app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    from label_analyzer.core.config import get_settings

    settings = get_settings()

    uvicorn.run(
        "label_analyzer.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.is_development,
        log_level=settings.logging.level.lower(),
    )
