from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from pagewright.routes import router
from pagewright.logger import get_logger
import config

logger = get_logger(__name__)

app = FastAPI(title="Pagewright API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


if __name__ == "__main__":
    logger.info(f"Starting Pagewright API on port {config.PORT}")
    uvicorn.run("main:app", host="0.0.0.0", port=config.PORT, reload=config.DEBUG_MODE)
