"""Create the blog schema in the database named by `DATABASE_URL`."""
from blog_api.config import Settings
from blog_api.database import build_engine, create_db_and_tables
from sqlalchemy import inspect


def run(database_url=None):
    """Create the `usuarios`, `tema` and `postagem` tables if missing.

    Existing tables are left untouched, so running it twice is harmless.
    Returns the table names present afterwards.
    """
    url = database_url or Settings().DATABASE_URL
    print("Using database:", url)
    engine = build_engine(url)
    try:
        create_db_and_tables(engine)
        tables = sorted(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    print("Tables:", ", ".join(tables))
    return tables


if __name__ == '__main__':
    run()
