import uvicorn

from api.main import create_fastapi_app
from config.settings import get_core_settings

app = create_fastapi_app()


if __name__ == "__main__":
    settings = get_core_settings()
    uvicorn.run(
        "app_fastapi:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.environment == "development",
    )
