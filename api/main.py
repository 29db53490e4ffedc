"""
FastAPI main application for the Book Index API.
"""

import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config
from api.models import Book, BookUpdate, ErrorResponse, HealthResponse
from api.search_index import BookIndexService
from utilities.logger import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file,
        debug=config.debug
    )
    logger.info("Starting Book Index API", port=config.port)

    client = AsyncElasticsearch(
        config.elastic_url,
        request_timeout=config.elastic_request_timeout
    )
    try:
        info = await client.info()
        logger.info(
            "Index engine connection established",
            url=config.elastic_url,
            cluster=info["cluster_name"],
            version=info["version"]["number"]
        )
    except Exception as e:
        logger.error("Failed to connect to index engine", url=config.elastic_url, error=str(e))
        await client.close()
        raise

    app.state.book_index = BookIndexService(
        client,
        index=config.elastic_index,
        refresh=config.refresh_policy()
    )

    yield

    logger.info("Shutting down Book Index API")
    await app.state.book_index.close()
    del app.state.book_index


app = FastAPI(
    title=config.api_title,
    description="CRUD operations over Book documents stored in an Elasticsearch index.",
    version=config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=config.cors_allow_credentials,
    allow_methods=config.cors_allow_methods,
    allow_headers=config.cors_allow_headers,
)


def get_book_index(request: Request) -> BookIndexService:
    """Index service created at startup."""
    book_index = getattr(request.app.state, "book_index", None)
    if book_index is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Index service not available"
        )
    return book_index


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return PlainTextResponse(
        ErrorResponse(error=str(exc.detail), status_code=exc.status_code).render(),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return PlainTextResponse(
        ErrorResponse(
            error="Internal server error",
            detail=str(exc) if config.debug else None,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        ).render(),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    """Health check endpoint."""
    index_status = "unavailable"
    book_index = getattr(request.app.state, "book_index", None)
    if book_index is not None:
        health_info = await book_index.health_check()
        index_status = health_info.get("status", "unknown")

    return HealthResponse(
        status="healthy" if index_status == "healthy" else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=config.api_version,
        index_status=index_status
    )


async def read_json_body(request: Request):
    """
    Decode the request body as JSON whatever its Content-Type.

    Raises a 400 when the body is not valid JSON.
    """
    body = await request.body()
    try:
        return json.loads(body)
    except ValueError as e:
        logger.warning("Invalid input", path=request.url.path, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input"
        )


def _json_request_body(schema: dict) -> dict:
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema}}
        }
    }


# Books endpoints
@app.post(
    "/books/{book_id}",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    tags=["Books"],
    openapi_extra=_json_request_body(Book.model_json_schema())
)
async def create_book(
    book_id: str,
    request: Request,
    book_index: BookIndexService = Depends(get_book_index)
):
    """
    Index a book under the given ID.

    An existing book with the same ID is replaced.
    """
    payload = await read_json_body(request)
    try:
        book = Book.model_validate(payload)
    except ValueError as e:
        logger.warning("Invalid input", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input"
        )

    try:
        await book_index.index_book(book_id, book)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create book"
        )

    return PlainTextResponse(
        f"Book with ID {book_id} created\n",
        status_code=status.HTTP_201_CREATED
    )


@app.get("/books/{book_id}", response_model=Book, tags=["Books"])
async def get_book(
    book_id: str,
    book_index: BookIndexService = Depends(get_book_index)
):
    """Get a single book by ID."""
    try:
        book = await book_index.get_book(book_id)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get book"
        )

    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found"
        )
    return book


@app.put(
    "/books/{book_id}",
    response_class=PlainTextResponse,
    tags=["Books"],
    openapi_extra=_json_request_body({"type": "object"})
)
async def update_book(
    book_id: str,
    request: Request,
    book_index: BookIndexService = Depends(get_book_index)
):
    """
    Merge the given fields into a stored book.

    Fields left out of the body keep their stored values.
    """
    payload = await read_json_body(request)
    try:
        fields = BookUpdate.validate_python(payload)
    except ValueError as e:
        logger.warning("Invalid input", book_id=book_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid input"
        )

    try:
        await book_index.update_book(book_id, fields)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update book"
        )

    return PlainTextResponse(f"Book with ID {book_id} updated\n")


@app.delete("/books/{book_id}", response_class=PlainTextResponse, tags=["Books"])
async def delete_book(
    book_id: str,
    book_index: BookIndexService = Depends(get_book_index)
):
    """Delete a book by ID."""
    try:
        await book_index.delete_book(book_id)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete book"
        )

    return PlainTextResponse(f"Book with ID {book_id} deleted\n")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower()
    )
