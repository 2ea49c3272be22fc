# Database module
from .connection import engine, get_session, init_db, close_db, db_lock, DB_PATH, DATABASE_URL
from .schema import init_raw_db, CURRENT_SCHEMA_VERSION
