import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from config import settings
from library import Library, StorageError, create_library
from utils.validators import TextValidator

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# İstemcilere dönen sabit metinler; hatalar da 200 ile düz metin olarak döner
MISSING_TITLE = "missing required field title"
MISSING_COMMENT = "missing required field comment"
NO_BOOK = "no book exists"
DELETE_OK = "delete successful"
DELETE_ALL_OK = "complete delete successful"
STORAGE_FAILED = "could not perform operation"


# --- Modeller ---
class BookSummaryModel(BaseModel):
    id: str = Field(alias="_id")
    title: str
    commentcount: int

class BookCreatedModel(BaseModel):
    id: str = Field(alias="_id")
    title: str

class BookDetailModel(BaseModel):
    id: str = Field(alias="_id")
    title: str
    comments: List[str] = Field(default_factory=list)

class HealthModel(BaseModel):
    status: str
    backend: str
    total_books: Optional[int] = None
    timestamp: str


# --- Bağımlılıklar ---
def get_library(request: Request) -> Library:
    """Başlangıçta seçilen depolama arka ucunu döndür."""
    return request.app.state.library

async def get_body(request: Request) -> Dict[str, Any]:
    """İstek gövdesini JSON veya form olarak oku.

    Okunamayan ya da boş gövde, alanların eksik olduğu anlamına gelir;
    422 yerine işleyicideki varlık kontrolü sabit metni döndürür.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            data = await request.json()
        elif content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
            data = dict(await request.form())
        else:
            return {}
    except (ValueError, UnicodeDecodeError, MultiPartException, StarletteHTTPException):
        # Bozuk multipart gövdesinde Starlette 400 yükseltir; alan eksik sayılır
        return {}
    return data if isinstance(data, dict) else {}


# --- Kitap uç noktaları ---
router = APIRouter()

@router.get("/api/books", response_model=List[BookSummaryModel])
def list_books(library: Library = Depends(get_library)):
    """Tüm kitapları yorum sayılarıyla listele."""
    return [BookSummaryModel(**b.to_summary()) for b in library.list_books()]

@router.post("/api/books", response_model=BookCreatedModel)
def create_book(body: Dict[str, Any] = Depends(get_body), library: Library = Depends(get_library)):
    """Yeni bir kitap oluştur; kimliği depolama atar."""
    title = body.get("title")
    if not TextValidator.validate_title(title):
        return PlainTextResponse(MISSING_TITLE)
    book = library.add_book(title)
    return BookCreatedModel(**book.to_created())

@router.delete("/api/books")
def delete_all_books(library: Library = Depends(get_library)):
    removed = library.remove_all_books()
    logger.info(f"Deleted all books ({removed})")
    return PlainTextResponse(DELETE_ALL_OK)

@router.get("/api/books/{book_id}", response_model=BookDetailModel)
def get_book(book_id: str, library: Library = Depends(get_library)):
    """Tek bir kitabı yorumlarıyla birlikte al."""
    book = library.find_book(book_id)
    if not book:
        return PlainTextResponse(NO_BOOK)
    return BookDetailModel(**book.to_dict())

@router.post("/api/books/{book_id}", response_model=BookDetailModel)
def add_comment(
    book_id: str,
    body: Dict[str, Any] = Depends(get_body),
    library: Library = Depends(get_library),
):
    """Bir kitaba yorum ekle ve güncel kitabı döndür."""
    # Yorum kontrolü kimlik kontrolünden önce gelir
    comment = body.get("comment")
    if not TextValidator.validate_comment(comment):
        return PlainTextResponse(MISSING_COMMENT)
    book = library.add_comment(book_id, comment)
    if not book:
        return PlainTextResponse(NO_BOOK)
    return BookDetailModel(**book.to_dict())

@router.delete("/api/books/{book_id}")
def delete_book(book_id: str, library: Library = Depends(get_library)):
    if not library.remove_book(book_id):
        return PlainTextResponse(NO_BOOK)
    return PlainTextResponse(DELETE_OK)

# --- Sağlık Kontrolü ---
@router.get("/health", response_model=HealthModel)
def health(library: Library = Depends(get_library)):
    """Hafif sağlık uç noktası; depolama hatasında bile 200 döner."""
    try:
        total = library.count_books()
        status = "healthy"
    except StorageError:
        total = None
        status = "degraded"
    return HealthModel(
        status=status,
        backend=library.backend,
        total_books=total,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )

@router.get("/")
def root():
    return {"message": settings.app_name, "version": settings.app_version, "docs": "/docs"}


# --- Hata işleyicileri ---
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"{request.method} {request.url.path} failed: {exc} ({exc.__cause__!r})")
    return PlainTextResponse(STORAGE_FAILED, status_code=500)


# --- Uygulama ---
def create_app(library: Optional[Library] = None) -> FastAPI:
    """FastAPI uygulamasını oluştur.

    Bir Library verilirse (ör. testlerde) doğrudan kullanılır; aksi halde
    başlangıçta ayarlardan seçilir ve kapanışta kapatılır.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = None
        if app.state.library is None:
            owned = create_library(settings)
            app.state.library = owned
        logger.info(f"Using {app.state.library.backend} storage backend")
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
                app.state.library = None

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)
    app.state.library = library

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorageError, storage_error_handler)
    app.include_router(router)
    return app


app = create_app()
