"""
App Builder Service - Main Entry Point
Chat-driven app generation, live preview, Flutter code and mock deployment
"""

import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from injector import Injector
from prometheus_client import CONTENT_TYPE_LATEST

from clients import ImagenClient
from core import (
    ChatRequest,
    InputUpdateRequest,
    Settings,
    SignInRequest,
    ViewRequest,
    configure_logging,
    create_container,
    get_logger,
    get_settings,
)
from handlers import Workspace
from models import ModelLoader
from monitoring import metrics_collector
from services import AuthError, SessionContext


logger = get_logger(__name__)

SERVICE_NAME = "App Builder Service"
VERSION = "0.1.0"


def create_app(container: Injector | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-wired injector; the default container is created at
            startup when omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire dependencies on startup, release them on shutdown"""
        owns_container = container is None
        if owns_container:
            settings = get_settings()
            configure_logging(settings.log_level, settings.json_logs)
        injector = container or create_container(get_settings())

        session = injector.get(SessionContext)
        session.initialize()

        app.state.container = injector
        app.state.session = session
        app.state.workspace = injector.get(Workspace)
        logger.info("service_ready", session=session.id)

        yield

        app.state.workspace.close()
        if owns_container:
            injector.get(ImagenClient).close()
            ModelLoader.unload()
        logger.info("shutdown_complete")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Describe an app in plain language, preview it live, get Flutter code and deploy",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        logger.info("unauthorized", path=request.url.path, reason=str(exc))
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    def get_session(request: Request) -> SessionContext:
        return request.app.state.session

    def get_workspace(request: Request) -> Workspace:
        workspace: Workspace = request.app.state.workspace
        workspace.session.require_user()
        return workspace

    @app.get("/")
    async def root():
        """Service info"""
        return {
            "status": "online",
            "service": SERVICE_NAME,
            "version": VERSION,
            "timestamp": time.time(),
        }

    @app.get("/health")
    async def health(session: SessionContext = Depends(get_session)):
        """Health check"""
        return {
            "status": "healthy",
            "auth_state": session.auth_state.value,
            "models_loaded": len(ModelLoader._instances),
        }

    @app.get("/metrics")
    async def metrics():
        return Response(content=metrics_collector.export(), media_type=CONTENT_TYPE_LATEST)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def auth_payload(session: SessionContext, settings: Settings) -> dict:
        user = session.user
        return {
            "authState": session.auth_state.value,
            "user": user.model_dump() if user is not None else None,
            "clientId": settings.google_client_id,
        }

    @app.post("/auth/sign-in")
    async def sign_in(
        body: SignInRequest,
        session: SessionContext = Depends(get_session),
        settings: Settings = Depends(get_settings),
    ):
        session.sign_in(body.credential)
        return auth_payload(session, settings)

    @app.post("/auth/sign-out")
    async def sign_out(
        session: SessionContext = Depends(get_session),
        settings: Settings = Depends(get_settings),
    ):
        session.sign_out()
        return auth_payload(session, settings)

    @app.get("/auth/me")
    async def me(
        session: SessionContext = Depends(get_session),
        settings: Settings = Depends(get_settings),
    ):
        """Current user plus the client id the sign-in button needs"""
        return auth_payload(session, settings)

    # ------------------------------------------------------------------
    # Workspace
    # ------------------------------------------------------------------

    @app.post("/chat")
    async def chat(
        body: ChatRequest,
        workspace: Workspace = Depends(get_workspace),
        settings: Settings = Depends(get_settings),
    ):
        if len(body.message) > settings.max_message_length:
            raise HTTPException(
                status_code=422,
                detail=f"Message exceeds {settings.max_message_length} characters",
            )
        await workspace.send_message(body.message)
        return workspace.snapshot()

    @app.get("/workspace")
    async def workspace_state(workspace: Workspace = Depends(get_workspace)):
        return workspace.snapshot()

    @app.get("/preview")
    async def preview(workspace: Workspace = Depends(get_workspace)):
        return workspace.render().to_dict()

    @app.put("/preview/inputs/{component_id}")
    async def update_input(
        component_id: str,
        body: InputUpdateRequest,
        workspace: Workspace = Depends(get_workspace),
    ):
        workspace.set_input_value(component_id, body.value)
        return workspace.render().to_dict()

    @app.post("/preview/buttons/{button_id}/invoke")
    async def invoke_button(
        button_id: str,
        wait: bool = True,
        workspace: Workspace = Depends(get_workspace),
    ):
        await workspace.invoke(button_id, wait=wait)
        return workspace.render().to_dict()

    @app.get("/code")
    async def code(wait: bool = False, workspace: Workspace = Depends(get_workspace)):
        if wait:
            await workspace.wait_for_code()
        return {
            "sourceCode": workspace.source_code,
            "isGeneratingCode": workspace.is_generating_code,
            "codeError": workspace.code_error,
        }

    @app.post("/deploy")
    async def deploy(workspace: Workspace = Depends(get_workspace)):
        await workspace.deploy()
        return workspace.snapshot()

    @app.post("/start-over")
    async def start_over(workspace: Workspace = Depends(get_workspace)):
        workspace.start_over()
        return workspace.snapshot()

    @app.put("/view")
    async def set_view(body: ViewRequest, workspace: Workspace = Depends(get_workspace)):
        workspace.set_view(body.view)
        return workspace.snapshot()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
