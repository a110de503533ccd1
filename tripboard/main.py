from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from tripboard.core.config import settings
from tripboard.routes import api_router
from tripboard.core.redis_lifecycle import init_redis_client, close_redis
from tripboard.core.init_db import init_db

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    openapi_url="/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all API routes
app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Welcome to Tripboard API"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.on_event("startup")
async def startup_event():
    await init_db()
    await init_redis_client()


@app.on_event("shutdown")
async def shutdown_event():
    await close_redis()
