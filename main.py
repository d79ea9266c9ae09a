import uvicorn

from app.core.app import app  # noqa: F401
from app.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    reload = settings.APP_ENV == "development"
    uvicorn.run("app.core.app:app", host=settings.HOST, port=settings.PORT, reload=reload)
