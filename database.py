import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import settings

logger = logging.getLogger(__name__)

BOOKS_COLLECTION = "books"


def get_db_connection(
    url: Optional[str] = None,
    name: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> Database:
    """MongoDB'ye bağlanır ve ping ile bağlantıyı doğrular.

    Bağlantı kurulamazsa istemci kapatılır ve PyMongoError yükseltilir;
    yedek depolamaya geçiş kararı çağırana aittir.
    """
    url = url or settings.database_url
    name = name or settings.database_name
    timeout_ms = timeout_ms or settings.database_timeout_ms

    client = MongoClient(url, serverSelectionTimeoutMS=timeout_ms)
    try:
        # MongoClient tembel bağlanır; sunucuya gerçekten ulaşılabildiğinden emin ol
        client.admin.command("ping")
    except PyMongoError:
        client.close()
        raise
    logger.info(f"Connected to MongoDB database '{name}'")
    return client[name]


def initialize_database(db: Database) -> Collection:
    """Kitap koleksiyonunu döndürür.

    MongoDB koleksiyonları ilk yazmada kendiliğinden oluşturur, bu yüzden
    şema veya geçiş adımı yoktur.
    """
    return db[BOOKS_COLLECTION]
