import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware

from bookmyticket.db.init_db import init_store
from bookmyticket.db.session import create_store
from bookmyticket.core.config import settings
from bookmyticket.api.v1.router import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: connect the document store and ensure its indexes
    app.state.store = create_store()
    await init_store(app.state.store)
    logger.info("%s started with the %s store.", settings.PROJECT_NAME, settings.STORE_BACKEND)
    yield

    # Shutdown
    await app.state.store.close()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {"Hello": "BookMyTicket"}
