import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from channel_graph.api.routes import router
from channel_graph.config import CORS_ORIGINS, LOG_LEVEL

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Server/Channel/Identifier Graph",
    version="0.1.0",
)

# Middleware before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
