from prometheus_fastapi_instrumentator import Instrumentator

from app.core.logging import configure_logging
from . import app as base_app

configure_logging()
app = base_app
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, include_in_schema=False)


@app.get("/health")
async def health() -> dict[str, bool]:
    return {"ok": True}
