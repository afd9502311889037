"""Porto do Itaqui stakeholder map: layer service.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers.assistant import router as assistant_router
from app.routers.layers import router as layers_router
from portmap import __version__
from portmap.layers import JsonFileStore, LayerStore
from portmap.layers.seed import INITIAL_LAYERS


def create_layer_store() -> LayerStore:
    """Seed layers plus the local key-value store for custom ones."""
    return LayerStore(
        seed=INITIAL_LAYERS,
        storage=JsonFileStore(settings.layers_store_path),
        key=settings.layers_store_key,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} v{__version__} - INITIALIZING")
    logger.info("=" * 60)

    store = create_layer_store()
    app.state.layer_store = store
    await store.load()
    logger.info(f"Layers: {len(store.layers)} ({len(store.custom_layers())} custom)")
    logger.info(f"Custom layers stored in {settings.layers_store_path}")

    yield

    logger.info("Shutting down, flushing layer storage...")
    await store.flush()


app = FastAPI(
    title="Porto do Itaqui Map",
    description="Geographic layers and assistant for the port-area stakeholder dashboard",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(layers_router)
app.include_router(assistant_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": __version__,
        "system": settings.app_name,
    }


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
