import logging

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from config import MONGODB_URL

logger = logging.getLogger(__name__)

_client: AsyncIOMotorClient | None = None
_database_name: str | None = None


def database_name_from_url(url: str) -> str:
    """Database named in the URL path, ignoring query options."""
    name = url.rsplit("/", 1)[-1].split("?")[0]
    if not name or "@" in name or ":" in name:
        raise ValueError(f"MongoDB URL does not name a database: {url!r}")
    return name


async def init_db(url: str | None = None):
    """Connect and register the compliance documents with Beanie."""
    global _client, _database_name

    from .models import (
        EmployeeDoc,
        EmployeeDocumentDoc,
        TaskCodeDoc,
        TimesheetDoc,
        TimesheetEntryDoc,
        ComplianceCheckLogDoc,
    )

    url = url or MONGODB_URL
    _database_name = database_name_from_url(url)
    _client = AsyncIOMotorClient(url)
    database = _client[_database_name]

    await init_beanie(
        database=database,
        document_models=[
            EmployeeDoc,
            EmployeeDocumentDoc,
            TaskCodeDoc,
            TimesheetDoc,
            TimesheetEntryDoc,
            ComplianceCheckLogDoc,
        ],
    )
    logger.info(f"Connected to MongoDB database {_database_name}")

    return database


def get_database():
    if _client is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _client[_database_name]


async def close_db():
    global _client, _database_name
    if _client is not None:
        _client.close()
        _client = None
        _database_name = None
