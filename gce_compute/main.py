from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI, Request

from gce_compute.client import ClientFactory
from gce_compute.config import CA_BUNDLE, COMPUTE_URL, METADATA_TOKEN_URL, PORT, SCOPES, filtered_settings
from gce_compute.provider import CachedClientProvider
from gce_compute.token_source import MetadataTokenSource
from gce_compute.transport import TransportFactory


def build_provider() -> CachedClientProvider:
    return CachedClientProvider(
        transport_factory=TransportFactory(ca_bundle=CA_BUNDLE or None),
        token_source=MetadataTokenSource(METADATA_TOKEN_URL, SCOPES),
        client_factory=ClientFactory(COMPUTE_URL),
    )


def create_app(provider: CachedClientProvider | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.provider = provider or build_provider()
        app.state.provider.start()
        try:
            yield
        finally:
            app.state.provider.stop()
            app.state.provider.close()

    app = FastAPI(title="GCE Compute Client Service", lifespan=lifespan)

    @app.get("/health")
    def health(request: Request):
        return {
            "status": "ok",
            "service": "gce-compute",
            "provider_started": request.app.state.provider.started,
            "time": datetime.now().isoformat(),
        }

    @app.get("/settings")
    def settings():
        return filtered_settings()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
