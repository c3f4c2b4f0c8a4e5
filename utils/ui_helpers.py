import os
import json
from typing import List, Any, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

# CLI çıktı modunu kontrol eden ortam değişkeni
# İzin verilen değerler: 'plain' (varsayılan), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    # Geçersiz değerleri yoksay; mevcut varsayılanı koru

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_list_result(books: List[Any]) -> None:
    """Kitap listesini mevcut çıktı moduna göre yazdır.
    - plain: '<id> - <başlık> (<n> comments)' satırları, veya 'No books in library.'
    - json: API ile aynı biçimde _id, title, commentcount dizisi
    - rich: Rich tablosu
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_summary() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Comments", justify="right")
        for b in books:
            table.add_row(b.id, escape(b.title), str(b.comment_count))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} ({b.comment_count} comments)")

def print_book_result(book: Any) -> None:
    """Tek bir kitabı yorumlarıyla birlikte yazdır."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        lines = [f"[bold]Title:[/] {escape(book.title)}", f"[bold]ID:[/] {book.id}"]
        if book.comments:
            lines.append("[bold]Comments:[/]")
            lines.extend(f"  • {escape(c)}" for c in book.comments)
        else:
            lines.append("[dim]No comments yet.[/]")
        _console.print(Panel.fit("\n".join(lines), title="📖 Book Found", border_style="cyan"))
    else:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"ID: {book.id}")
        print(f"Comments: {book.comment_count}")
        for i, c in enumerate(book.comments, 1):
            print(f"  {i}. {c}")

def print_stats_result(stats: Dict[str, Any]) -> None:
    """İstatistikleri mevcut çıktı moduna göre yazdır.
    - plain: her metrik için bir satır
    - json: JSON nesnesi
    - rich: Ana metriklerle Panel
    """
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    total = stats.get("total_books", 0)
    comments = stats.get("total_comments", 0)
    backend = stats.get("backend", "")

    if mode == "json":
        print(json.dumps({"total_books": total, "total_comments": comments, "backend": backend}, ensure_ascii=False))
    elif mode == "rich":
        content = f"[bold]Total Books:[/] {total}\n[bold]Total Comments:[/] {comments}\n[bold]Backend:[/] {backend}"
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        print(f"Total Books: {total}")
        print(f"Total Comments: {comments}")
        print(f"Backend: {backend}")
