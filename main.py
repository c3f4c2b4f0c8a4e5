import subprocess
import sys
import webbrowser
from functools import wraps
from typing import Optional

import typer
from rich.console import Console

from config import settings
from library import Library, StorageError, create_library
from utils.ui_helpers import set_output_mode, print_list_result, print_book_result, print_stats_result
from utils.validators import TextValidator

APP_NAME = "Personal Library CLI"

console = Console()


# Tekil Kütüphane örneği; arka uç ilk kullanımda bir kez seçilir
class LibraryManager:
    _instance: Optional[Library] = None

    @classmethod
    def get_instance(cls) -> Library:
        """Library örneğini al veya ayarlardan oluştur."""
        if cls._instance is None:
            cls._instance = create_library(settings)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Mevcut örneği kapat; bir sonraki çağrı yeniden oluşturur."""
        if cls._instance is not None:
            cls._instance.close()
        cls._instance = None


# Depolama hatalarını sabit mesaja ve çıkış koduna çeviren dekoratör
def handle_storage_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StorageError:
            print("could not perform operation")
            raise typer.Exit(code=1)
    return wrapper


# --- Typer CLI Uygulaması ---
app = typer.Typer(help=APP_NAME)

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Çıktı formatı: plain | json | rich (varsayılan: plain)",
    )
):
    """CLI için genel seçenekler (ör. çıktı modu)."""
    if output:
        set_output_mode(output)

@app.command("list")
@handle_storage_errors
def cli_list():
    """Tüm kitapları yorum sayılarıyla listele."""
    print_list_result(LibraryManager.get_instance().list_books())

@app.command("add")
@handle_storage_errors
def cli_add(title: str):
    """Başlığa göre yeni bir kitap ekle."""
    if not TextValidator.validate_title(title):
        print("missing required field title")
        return
    book = LibraryManager.get_instance().add_book(title)
    print(f"Successfully added: {book.title} (id: {book.id})")

@app.command("show")
@handle_storage_errors
def cli_show(book_id: str):
    """Bir kitabı yorumlarıyla birlikte göster."""
    book = LibraryManager.get_instance().find_book(book_id)
    if not book:
        print("no book exists")
        return
    print_book_result(book)

@app.command("comment")
@handle_storage_errors
def cli_comment(book_id: str, text: str):
    """Bir kitaba yorum ekle."""
    if not TextValidator.validate_comment(text):
        print("missing required field comment")
        return
    book = LibraryManager.get_instance().add_comment(book_id, text)
    if not book:
        print("no book exists")
        return
    print(f"Comment added to {book.id}. Total comments: {book.comment_count}")

@app.command("remove")
@handle_storage_errors
def cli_remove(book_id: str):
    """Kimliğe göre bir kitabı sil."""
    if LibraryManager.get_instance().remove_book(book_id):
        print("delete successful")
    else:
        print("no book exists")

@app.command("clear")
@handle_storage_errors
def cli_clear(yes: bool = typer.Option(False, "--yes", "-y", help="Onay sormadan sil")):
    """Tüm kitapları sil."""
    if not yes and not typer.confirm("Delete all books?", default=False):
        print("Aborted.")
        return
    LibraryManager.get_instance().remove_all_books()
    print("complete delete successful")

@app.command("stats")
@handle_storage_errors
def cli_stats():
    """Kütüphane istatistiklerini göster."""
    lib = LibraryManager.get_instance()
    books = lib.list_books()
    print_stats_result({
        "total_books": len(books),
        "total_comments": sum(b.comment_count for b in books),
        "backend": lib.backend,
    })

@app.command("serve")
def cli_serve(
    host: str = typer.Option(settings.api_host, "--host", help="Dinlenecek adres"),
    port: int = typer.Option(settings.api_port, "--port", help="Dinlenecek port"),
    reload: bool = typer.Option(False, "--reload", help="Kod değişince yeniden başlat"),
    open_browser: bool = typer.Option(False, "--open", help="Dokümanları tarayıcıda aç"),
):
    """Uvicorn kullanarak API'yi başlat."""
    url = f"http://{host}:{port}"
    print(f"Starting web UI on {url}")
    if open_browser:
        webbrowser.open(f"{url}/docs")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "api:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    try:
        subprocess.run(args, check=False)
    except KeyboardInterrupt:
        console.print("[dim]Server stopped[/]")


if __name__ == "__main__":
    app()
