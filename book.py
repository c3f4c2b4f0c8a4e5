from __future__ import annotations


class Book:
    """Represents a single book in the personal library."""

    def __init__(self, id: str, title: str, comments: list | None = None) -> None:
        self.id = str(id)
        self.title = title
        # Comments are append-only; a missing list is served as empty.
        self.comments = list(comments) if comments else []

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} (id: {self.id}, {self.comment_count} comments)"

    @property
    def comment_count(self) -> int:
        return len(self.comments)

    def to_summary(self) -> dict:
        return {"_id": self.id, "title": self.title, "commentcount": self.comment_count}

    def to_created(self) -> dict:
        return {"_id": self.id, "title": self.title}

    def to_dict(self) -> dict:
        return {"_id": self.id, "title": self.title, "comments": list(self.comments)}

    @staticmethod
    def from_document(data: dict) -> "Book":
        # Mongo belgelerinde _id bir ObjectId'dir; __init__ onu str'ye çevirir
        return Book(id=data["_id"], title=data["title"], comments=data.get("comments") or [])
