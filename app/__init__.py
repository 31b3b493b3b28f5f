"""Application wiring for the time tracker service.

Importing this package builds the FastAPI instance: database tables, the
middleware stack, the JSON error envelope and every API router. ``app.main``
adds logging configuration, metrics and the health probe on top.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import http_exception_handler, validation_exception_handler
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Importing the SQLAlchemy models registers them with the metadata. Without
# this step ``Base.metadata.create_all`` would not know about our tables.
from .models import project as _project  # noqa: F401
from .models import time_entry as _time_entry  # noqa: F401
from .models import user as _user  # noqa: F401

app = FastAPI(title=settings.APP_NAME)

# ``create_all`` only adds missing tables; schema changes to existing tables
# are out of scope for the service itself.
Base.metadata.create_all(bind=engine)

# ---------- Middleware ----------
# Added last runs first: request ids wrap everything so every log line
# carries one.
app.add_middleware(SecurityHeadersMiddleware)
if settings.ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
app.add_middleware(RequestIdMiddleware)

# ---------- Routers ----------
from .routers import api_auth as api_auth_router  # type: ignore

app.include_router(api_auth_router.router)

from .routers import api_profile as api_profile_router  # type: ignore

app.include_router(api_profile_router.router)

from .routers import api_projects as api_projects_router  # type: ignore

app.include_router(api_projects_router.router)

from .routers import api_entries as api_entries_router  # type: ignore

app.include_router(api_entries_router.router)

from .routers import api_reports as api_reports_router  # type: ignore

app.include_router(api_reports_router.router)

from .routers import api_admin as api_admin_router  # type: ignore

app.include_router(api_admin_router.router)

# ---------- Exception handling ----------
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)


__all__ = ["app"]
