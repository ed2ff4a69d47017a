import sqlite3
from contextlib import contextmanager
from config import DB_NAME
from database_schemas import KV_STORE_TABLE_SCHEMA

@contextmanager
def get_db(db_name: str = DB_NAME):
    conn = sqlite3.connect(db_name)
    try:
        yield conn
    finally:
        conn.close()

def init_db(db_name: str = DB_NAME):
    with get_db(db_name) as conn:
        cursor = conn.cursor()
        cursor.execute(KV_STORE_TABLE_SCHEMA)
        conn.commit()

if __name__ == "__main__":
    init_db()
