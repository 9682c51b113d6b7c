import uvicorn

from taskapi.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "taskapi.routes.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        workers=1
    )
