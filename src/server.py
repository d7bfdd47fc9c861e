import uvicorn
from portal_backend.settings import settings

if __name__ == "__main__":

    uvicorn.run(
        "portal_backend.server:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.DEBUG_MODE != "production",
        workers=1
    )
