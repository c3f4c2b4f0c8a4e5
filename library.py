import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import List, Optional

from bson import ObjectId
from bson.errors import BSONError
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from book import Book
from config import Settings
from database import get_db_connection, initialize_database

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend fails to perform an operation."""


class Library(ABC):
    """Storage interface for the book catalog.

    Both backends share one contract: lookups by an identifier that the
    backend cannot parse behave exactly like lookups of a missing book.
    """

    backend: str = ""

    # ------------------------- Core operations ------------------------- #
    @abstractmethod
    def list_books(self) -> List[Book]:
        ...

    @abstractmethod
    def add_book(self, title: str) -> Book:
        ...

    @abstractmethod
    def find_book(self, book_id: str) -> Optional[Book]:
        ...

    @abstractmethod
    def add_comment(self, book_id: str, comment: str) -> Optional[Book]:
        """Append a comment and return the updated book, or None if not found."""

    @abstractmethod
    def remove_book(self, book_id: str) -> bool:
        ...

    @abstractmethod
    def remove_all_books(self) -> int:
        """Delete every book. Returns the number of removed books."""

    @abstractmethod
    def count_books(self) -> int:
        ...

    @abstractmethod
    def is_valid_id(self, book_id: str) -> bool:
        ...

    def close(self) -> None:
        return None

    # ------------------------- Utilities ------------------------- #
    @staticmethod
    def _require_title(title: Optional[str]) -> str:
        if not title:
            raise ValueError("missing required field title")
        return title


class MemoryLibrary(Library):
    """In-process fallback used when no MongoDB connection is available.

    Nothing is persisted and there is no locking, so it is only meant for
    local runs and tests.
    """

    backend = "memory"

    def __init__(self) -> None:
        self.books: List[Book] = []
        self.next_id = 1

    def list_books(self) -> List[Book]:
        return list(self.books)

    def add_book(self, title: str) -> Book:
        book = Book(id=str(self.next_id), title=self._require_title(title))
        self.books.append(book)
        self.next_id += 1
        return book

    def find_book(self, book_id: str) -> Optional[Book]:
        # add_comment and remove_book also go through this lookup
        if not self.is_valid_id(book_id):
            return None
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def add_comment(self, book_id: str, comment: str) -> Optional[Book]:
        book = self.find_book(book_id)
        if not book:
            return None
        book.comments.append(comment)
        return book

    def remove_book(self, book_id: str) -> bool:
        book = self.find_book(book_id)
        if not book:
            return False
        self.books = [b for b in self.books if b.id != book_id]
        return True

    def remove_all_books(self) -> int:
        removed = len(self.books)
        self.books = []
        # Identifiers restart after a full wipe
        self.next_id = 1
        return removed

    def count_books(self) -> int:
        return len(self.books)

    def is_valid_id(self, book_id: str) -> bool:
        return isinstance(book_id, str)


class MongoLibrary(Library):
    """Book catalog stored as one MongoDB document per book."""

    backend = "mongodb"

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    @contextmanager
    def _storage_call(self, action: str):
        try:
            yield
        except (PyMongoError, BSONError) as exc:
            logger.error(f"Error {action}: {exc}")
            raise StorageError(f"Error {action}") from exc

    def list_books(self) -> List[Book]:
        with self._storage_call("fetching books"):
            return [Book.from_document(doc) for doc in self.collection.find({})]

    def add_book(self, title: str) -> Book:
        title = self._require_title(title)
        with self._storage_call("creating book"):
            result = self.collection.insert_one({"title": title, "comments": []})
        return Book(id=result.inserted_id, title=title)

    def find_book(self, book_id: str) -> Optional[Book]:
        if not self.is_valid_id(book_id):
            return None
        with self._storage_call("fetching book"):
            doc = self.collection.find_one({"_id": ObjectId(book_id)})
        return Book.from_document(doc) if doc else None

    def add_comment(self, book_id: str, comment: str) -> Optional[Book]:
        if not self.is_valid_id(book_id):
            return None
        with self._storage_call("adding comment"):
            # $push tek bir belge güncellemesidir, MongoDB tarafında atomiktir
            doc = self.collection.find_one_and_update(
                {"_id": ObjectId(book_id)},
                {"$push": {"comments": comment}},
                return_document=ReturnDocument.AFTER,
            )
        return Book.from_document(doc) if doc else None

    def remove_book(self, book_id: str) -> bool:
        if not self.is_valid_id(book_id):
            return False
        with self._storage_call("deleting book"):
            result = self.collection.delete_one({"_id": ObjectId(book_id)})
        return result.deleted_count > 0

    def remove_all_books(self) -> int:
        with self._storage_call("deleting all books"):
            result = self.collection.delete_many({})
        return result.deleted_count

    def count_books(self) -> int:
        with self._storage_call("counting books"):
            return self.collection.count_documents({})

    def is_valid_id(self, book_id: str) -> bool:
        return ObjectId.is_valid(book_id)

    def close(self) -> None:
        self.collection.database.client.close()


def create_library(settings: Settings) -> Library:
    """Pick the storage backend once at startup.

    A configured and reachable MongoDB wins; otherwise the in-memory
    fallback is used. Clients never see which one was picked.
    """
    if not settings.database_url:
        logger.info("No DB connection string found, using in-memory storage")
        return MemoryLibrary()

    try:
        db = get_db_connection(
            settings.database_url,
            settings.database_name,
            settings.database_timeout_ms,
        )
    except PyMongoError as exc:
        logger.warning(f"MongoDB connection error: {exc}. Using in-memory storage")
        return MemoryLibrary()

    return MongoLibrary(initialize_database(db))
