import logging

from fastapi import FastAPI

from adset_engine.adset_api import adset_router
from adset_engine.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Ad Set Engine", version="0.1.0")
app.include_router(adset_router)
