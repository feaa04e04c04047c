# app/main.py
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .backend import Backend, build_backend
from .config import Settings, configure_logging
from .errors import AdminPanelError
from .models import ProductIn


class LoginIn(BaseModel):
    email: str
    password: str


def create_app(
    settings: Optional[Settings] = None,
    backend_factory: Callable[[Settings], Backend] = build_backend,
) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    async def _open_backend() -> Backend:
        backend = backend_factory(settings)
        await backend.start()
        return backend

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.backend = await _open_backend()
        yield
        await app.state.backend.aclose()

    app = FastAPI(title="storefront-admin (in-memory demo)", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Error mapping
    # ---------------------------
    @app.exception_handler(AdminPanelError)
    async def admin_panel_error(request: Request, exc: AdminPanelError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(LookupError)
    async def lookup_error(request: Request, exc: LookupError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error(request: Request, exc: ValueError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    def dashboard(request: Request):
        return request.app.state.backend.dashboard

    # ---------------------------
    # Views
    # ---------------------------
    @app.get("/view")
    async def current_view(request: Request):
        return dashboard(request).render()

    # ---------------------------
    # Session events
    # ---------------------------
    @app.post("/login")
    async def login(payload: LoginIn, request: Request):
        await dashboard(request).submit_login(payload.email, payload.password)
        return dashboard(request).render()

    @app.post("/logout")
    async def logout(request: Request):
        await dashboard(request).submit_logout()
        return dashboard(request).render()

    # ---------------------------
    # Product events
    # ---------------------------
    @app.post("/products")
    async def submit_product(payload: ProductIn, request: Request):
        await dashboard(request).submit_product(**payload.model_dump())
        return dashboard(request).render()

    @app.post("/products/edit/cancel")
    async def cancel_edit(request: Request):
        dashboard(request).cancel_edit()
        return dashboard(request).render()

    @app.post("/products/{product_id}/edit")
    async def edit_product(product_id: str, request: Request):
        dashboard(request).request_edit(product_id)
        return dashboard(request).render()

    @app.delete("/products/{product_id}")
    async def delete_product(product_id: str, request: Request):
        await dashboard(request).request_delete(product_id)
        return dashboard(request).render()

    # ---------------------------
    # Utility: reset (for tests/demo)
    # ---------------------------
    @app.post("/reset")
    async def reset_all(request: Request):
        await request.app.state.backend.aclose()
        request.app.state.backend = await _open_backend()
        return {"status": "reset"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8085)
