import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

import config
from baselines import router as baselines_router
from profiles import list_profiles
from streams import router as streams_router

logging.getLogger("durability").setLevel(config.LOG_LEVEL)

app = FastAPI(title="Durability metrics")


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger = logging.getLogger("uvicorn.error")
    logger.error("Unhandled exception occurred: %s", exc)
    logger.error(traceback.format_exc())
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(streams_router)
app.include_router(baselines_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/profiles")
def profiles():
    return {"profiles": list_profiles(), "default": config.DEFAULT_PROFILE}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
