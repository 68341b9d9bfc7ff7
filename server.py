import errno
import logging
import socket
import sys
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict

from growgraph import google_helpers
from growgraph.backend import MindMapBackend
from growgraph.llm_client import ChatLlmClient
from growgraph.mindmap_store import MindMapStore

logger = logging.getLogger("growgraph")


class _Body(BaseModel):
    model_config = ConfigDict(extra="ignore")


class MindMapRequest(_Body):
    aim: Optional[Any] = None
    jobPath: Optional[Any] = None
    hobby: Optional[Any] = None
    mbti: Optional[Any] = None
    salary: Optional[Any] = None
    roleModel: Optional[Any] = None
    centerOnly: Optional[Any] = False


class SaveMindMapRequest(_Body):
    nodes: Optional[Any] = None
    edges: Optional[Any] = None


class SuggestionsRequest(_Body):
    nodeContent: Optional[Any] = None


class CareerDetailsRequest(_Body):
    careerTitle: Optional[Any] = None


class ExpandCareerRequest(_Body):
    careerTitle: Optional[Any] = None
    level: Optional[Any] = None


def build_backend() -> MindMapBackend:
    google_helpers.validate_environment()
    chat_llm = ChatLlmClient(
        google_helpers.OPENAI_MODEL,
        api_key=google_helpers.get_openai_api_key(),
        timeout=google_helpers.LLM_TIMEOUT_SECONDS,
        retries=google_helpers.LLM_MAX_RETRIES,
        initial_delay=google_helpers.LLM_INITIAL_DELAY,
    )
    store = MindMapStore(google_helpers.get_firestore_client(), google_helpers.MINDMAP_COLLECTION)
    return MindMapBackend(chat_llm, store)


def _server_error(error: str, e: Exception) -> HTTPException:
    logger.exception(error)
    return HTTPException(
        status_code=500,
        detail={"error": error, "details": str(e), "status": getattr(e, "status_code", None)},
    )


def create_app(backend: MindMapBackend | None = None) -> FastAPI:
    backend = backend or build_backend()

    app = FastAPI(title="GrowGraph API")

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "GrowGraph API is running"

    @app.post("/api/generate-mindmap")
    def generate_mindmap(body: MindMapRequest):
        try:
            return backend.generate_mindmap(body.model_dump())
        except Exception as e:
            raise _server_error("Failed to generate mind map", e)

    @app.post("/api/mindmap")
    def save_mindmap(body: SaveMindMapRequest):
        try:
            return backend.save_mindmap(body.model_dump())
        except Exception as e:
            raise _server_error("Failed to save mind map", e)

    @app.get("/api/mindmap")
    def list_mindmaps():
        try:
            return backend.list_mindmaps()
        except Exception as e:
            raise _server_error("Failed to fetch mind maps", e)

    @app.get("/api/mindmap/{mindmap_id}")
    def get_mindmap(mindmap_id: str):
        try:
            mind_map = backend.get_mindmap(mindmap_id)
        except Exception as e:
            raise _server_error("Failed to fetch mind map", e)
        if mind_map is None:
            raise HTTPException(status_code=404, detail=f"Mind map '{mindmap_id}' not found")
        return mind_map

    @app.post("/api/suggestions")
    def suggestions(body: SuggestionsRequest):
        try:
            return backend.suggestions(body.model_dump())
        except Exception as e:
            raise _server_error("Failed to generate suggestions", e)

    @app.post("/api/career-details")
    def career_details(body: CareerDetailsRequest):
        try:
            return backend.career_details(body.model_dump())
        except Exception as e:
            raise _server_error("Failed to generate career details", e)

    @app.post("/api/expand-career")
    def expand_career(body: ExpandCareerRequest):
        try:
            return backend.expand_career(body.model_dump())
        except Exception as e:
            raise _server_error("Failed to expand career node", e)

    return app


def _port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError as e:
            if e.errno == errno.EADDRINUSE:
                return False
            raise
    return True


def find_free_port(start_port: int, attempts: int = 10, host: str = "0.0.0.0") -> int:
    for port in range(start_port, start_port + attempts):
        if _port_is_free(host, port):
            return port
        logger.info(f"Port {port} is busy, trying {port + 1}")
    raise RuntimeError(f"No free port in range {start_port}-{start_port + attempts - 1}")


def main() -> None:
    import uvicorn

    try:
        app = create_app()
        port = find_free_port(google_helpers.PORT, google_helpers.PORT_ATTEMPTS)
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)

    logger.info(f"Server is running on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
