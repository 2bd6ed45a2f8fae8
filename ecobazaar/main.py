# ecobazaar/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ecobazaar.api import create_app
from ecobazaar.data.database import get_store, init_store
from ecobazaar.data.seed import seed
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_store()
    logger.info("Initializing record store")
    init_store(store)
    seed(store)
    yield


app = create_app(lifespan=lifespan)

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
