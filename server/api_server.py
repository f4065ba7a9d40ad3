"""FastAPI application entry point for docsynth_bridge."""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.clients.storage.StorageClientManager import StorageClientManager
from shared.clients.synthesis.SynthesisClientManager import SynthesisClientManager
from shared.history.AssetRehydrator import AssetRehydrator
from shared.history.HistoryStore import HistoryStore
from server.core.GenerationService import GenerationService
from server.routers.GenerateRouter import router as generate_router
from server.routers.HistoryRouter import router as history_router

logging = setup_logging()
app_version = os.getenv("APP_VERSION", "unknown")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = HelperConfig(logger=logging)

    storage_client = StorageClientManager(helper_config=app.state.helper_config).get_client()
    synthesis_client = SynthesisClientManager(helper_config=app.state.helper_config).get_client()

    logging.info("Booting clients...")
    for client in [storage_client, synthesis_client]:
        await client.boot()
    logging.info(
        "Clients booted (storage=%s, synthesis=%s).",
        storage_client.get_engine_name(),
        synthesis_client.get_engine_name(),
        color="green",
    )

    app.state.storage_client = storage_client
    app.state.synthesis_client = synthesis_client
    app.state.history_store = HistoryStore(helper_config=app.state.helper_config, storage_client=storage_client)
    app.state.asset_rehydrator = AssetRehydrator(helper_config=app.state.helper_config)
    app.state.generation_service = GenerationService(
        helper_config=app.state.helper_config,
        synthesis_client=synthesis_client,
        history_store=app.state.history_store,
    )

    # while the app is running...
    yield

    # when the app shuts down, close all clients
    logging.info("Shutting down, closing all clients...")
    for client in [storage_client, synthesis_client]:
        await client.close()
    logging.info("All clients closed.")


app = FastAPI(
    title="docsynth_bridge",
    description=(
        "Bridge between a document generation frontend and a loosely specified synthesis "
        "workflow. Extracts and verifies PDF documents from whatever the workflow returns "
        "via POST /generate and keeps a bounded history for re-display under /history."
    ),
    version=app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Document-Verified", "X-History-Entry"],
)

app.include_router(generate_router)
app.include_router(history_router)


if __name__ == "__main__":
    import uvicorn

    logging.info(
        "Starting docsynth_bridge API Server v%s from root dir: %s on port 8000...",
        app_version,
        os.environ.get("ROOT_DIR", os.getcwd()),
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
