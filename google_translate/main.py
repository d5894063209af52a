"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Depends
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import __version__
from .config import settings
from .translation_service import (
    ClientConfig,
    TranslationClient,
    ConfigurationError,
    DetectionError,
    TransportError,
    DecodeError
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared client's HTTP session on shutdown."""
    yield
    global _client
    if _client is not None:
        close = getattr(_client.transport, "close", None)
        if callable(close):
            close()
            logger.info("Translation client transport closed")
        _client = None


app = FastAPI(
    title=settings.app_name,
    description="Google Translate v2 client - 翻譯文字與偵測語言",
    version=__version__,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request / Response Models
class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str


class TranslateRequest(BaseModel):
    text: str
    target_lang: Optional[str] = None
    source_lang: Optional[str] = None
    auto_detect: bool = True


class TranslateResponse(BaseModel):
    original_text: str
    translated_text: Optional[str]
    source_lang: str
    target_lang: str


class DetectRequest(BaseModel):
    text: str


class DetectResponse(BaseModel):
    text: str
    language: str


# Client is created on first use
_client: Optional[TranslationClient] = None


def get_translation_client() -> TranslationClient:
    """Get or create the shared translation client."""
    global _client
    if _client is None:
        try:
            _client = TranslationClient(ClientConfig.from_settings(settings))
        except ConfigurationError as e:
            logger.error(f"Translation client not configured: {e}")
            raise HTTPException(status_code=503, detail=str(e))
        logger.info("Translation client initialised")
    return _client


def _raise_http(e: Exception):
    """Map client errors onto HTTP errors."""
    if isinstance(e, ConfigurationError):
        raise HTTPException(status_code=400, detail=str(e))
    if isinstance(e, DetectionError):
        raise HTTPException(status_code=422, detail=str(e))
    status = getattr(e, "status_code", None)
    detail = f"Translate API failure (HTTP {status})" if status else "Translate API failure"
    raise HTTPException(status_code=502, detail=detail)


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=__version__
    )


@app.post("/translate", response_model=TranslateResponse, tags=["Translation"])
def translate_text(
    request: TranslateRequest,
    client: TranslationClient = Depends(get_translation_client)
):
    """
    翻譯文字

    - 未指定 source_lang 且 auto_detect 開啟時先偵測語言
    - 服務沒有回傳翻譯時 translated_text 為 null
    """
    try:
        target = client.resolve_target(request.target_lang)
        source = client.resolve_source(request.text, request.source_lang, request.auto_detect)
        translated = client.translate(request.text, target_lang=target, source_lang=source)
    except (ConfigurationError, DetectionError, TransportError, DecodeError) as e:
        logger.error(f"Translation error: {e}")
        _raise_http(e)

    return TranslateResponse(
        original_text=request.text,
        translated_text=translated,
        source_lang=source,
        target_lang=target
    )


@app.post("/detect", response_model=DetectResponse, tags=["Translation"])
def detect_language(
    request: DetectRequest,
    client: TranslationClient = Depends(get_translation_client)
):
    """偵測文字語言"""
    try:
        language = client.detect(request.text)
    except (DetectionError, TransportError, DecodeError) as e:
        logger.error(f"Detection error: {e}")
        _raise_http(e)

    return DetectResponse(text=request.text, language=language)


@app.get("/", tags=["System"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "endpoints": {
            "health": "/health",
            "translate": "/translate",
            "detect": "/detect"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
