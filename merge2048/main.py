import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from merge2048.api.routes import router

# Pick up REDIS_URL / MERGE2048_* tuning from a local .env (existing env wins).
load_dotenv(override=False)

logging.basicConfig(level=os.environ.get("MERGE2048_LOG_LEVEL", "INFO").upper())

app = FastAPI(title="merge2048", version="0.1.0")
app.include_router(router)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "merge2048", "version": "0.1.0"}
