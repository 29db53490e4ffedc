"""
Index engine service layer for the FastAPI application.
Wraps the Elasticsearch client for Book document operations.
"""

from typing import Any, Dict, Optional, Union

from elasticsearch import AsyncElasticsearch, NotFoundError

from api.models import Book
from utilities.logger import get_logger

logger = get_logger(__name__)


class BookIndexService:
    """Index service for Book document operations."""

    def __init__(
        self,
        client: AsyncElasticsearch,
        index: str = "books",
        refresh: Union[bool, str] = "wait_for"
    ):
        self.client = client
        self.index = index
        self.refresh = refresh

    async def index_book(self, book_id: str, book: Book) -> None:
        """
        Index a book under the given ID, replacing any existing document.

        Args:
            book_id: Document identifier
            book: Book to store
        """
        try:
            await self.client.index(
                index=self.index,
                id=book_id,
                document=book.model_dump(),
                refresh=self.refresh
            )
            logger.info("Book indexed", book_id=book_id, index=self.index)
        except Exception as e:
            logger.error("Failed to index book", book_id=book_id, error=str(e))
            raise

    async def get_book(self, book_id: str) -> Optional[Book]:
        """
        Get a single book by ID.

        Args:
            book_id: Document identifier

        Returns:
            Book if found, None otherwise
        """
        try:
            response = await self.client.get(index=self.index, id=book_id)
        except NotFoundError:
            logger.debug("Book not found", book_id=book_id, index=self.index)
            return None
        except Exception as e:
            logger.error("Failed to get book", book_id=book_id, error=str(e))
            raise

        if not response["found"]:
            return None
        return Book.from_source(response["_source"])

    async def update_book(self, book_id: str, fields: Dict[str, Any]) -> None:
        """
        Partially update a book; fields not given keep their stored values.

        Args:
            book_id: Document identifier
            fields: Fields to merge into the stored document
        """
        try:
            await self.client.update(
                index=self.index,
                id=book_id,
                doc=fields,
                refresh=self.refresh
            )
            logger.info("Book updated", book_id=book_id, fields=sorted(fields))
        except Exception as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise

    async def delete_book(self, book_id: str) -> None:
        """Delete a book by ID."""
        try:
            await self.client.delete(
                index=self.index,
                id=book_id,
                refresh=self.refresh
            )
            logger.info("Book deleted", book_id=book_id, index=self.index)
        except Exception as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise

    async def health_check(self) -> Dict:
        """
        Perform index engine health check.

        Returns:
            Dictionary with health status
        """
        try:
            if not await self.client.ping():
                return {"status": "unhealthy", "error": "ping failed"}
            return {"status": "healthy", "index": self.index}
        except Exception as e:
            logger.error("Index health check failed", error=str(e))
            return {
                "status": "unhealthy",
                "error": str(e)
            }

    async def close(self) -> None:
        """Close the underlying client."""
        await self.client.close()
