from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from ..features.session import SessionManager, create_session_router
from ..features.session.concurrency import shutdown_executor

logger = logging.getLogger(__name__)

ASSETS_ENV_VAR = "WORDHUNT_ASSETS"
_WEB_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(_WEB_DIR / "templates"))


def _mount_assets(app: FastAPI, root: Path) -> None:
    for name in ("images", "audio"):
        directory = root / name
        if directory.is_dir():
            app.mount(f"/{name}", StaticFiles(directory=str(directory)), name=name)
        else:
            logger.warning("Asset directory missing; %s will 404", name, extra={"directory": str(directory)})


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_executor()


def create_app(manager: SessionManager | None = None, *, assets: Path | None = None) -> FastAPI:
    app = FastAPI(title="Word Hunt", lifespan=_lifespan)
    app.state.manager = manager or SessionManager()
    app.include_router(create_session_router(app.state.manager, templates))

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return (_WEB_DIR / "static" / "index.html").read_text(encoding="utf-8")

    asset_root = assets or (Path(os.environ[ASSETS_ENV_VAR]) if os.environ.get(ASSETS_ENV_VAR) else None)
    if asset_root is not None:
        _mount_assets(app, asset_root)
    return app


app = create_app()


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host=host, port=port, factory=False)


if __name__ == "__main__":  # pragma: no cover
    main()
