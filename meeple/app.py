#!/usr/bin/env python3

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from meeple.routes import api
from meeple.configs import OPTIONS, LOG_LEVEL, CORS_ORIGINS
from meeple import __version__ as VERSION

logging.getLogger("meeple").setLevel(LOG_LEVEL.upper())

app = FastAPI(
    title="Meeple API",
    description="Meeple: board-game lending with a spreadsheet ledger",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api.router, prefix="/v1/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("meeple.app:app", **OPTIONS)
