from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from app.core.config import settings
from app.services.records import SqlRecordStore

# sqlite needs check_same_thread=False when used in ASGI contexts
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine: Engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args)

def get_record_store() -> SqlRecordStore:
    return SqlRecordStore(engine)

def get_today() -> date:
    # host's local calendar day
    return date.today()
