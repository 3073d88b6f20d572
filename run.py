import uvicorn

from studyai.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "studyai.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",  # Only reload in development
        log_level="info" if settings.environment == "development" else "warning",
    )
