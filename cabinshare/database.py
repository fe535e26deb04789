from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from cabinshare.config import settings

_engine_kwargs = {
    "pool_pre_ping": True,  # Verify connections before using
    "echo": settings.DEBUG,  # Log SQL queries in debug mode
}
if "sqlite" in settings.DATABASE_URL:
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
else:
    _engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
    _engine_kwargs["max_overflow"] = settings.DB_MAX_OVERFLOW

# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    Yields a database session and ensures it's closed after use.

    Usage:
        @app.get("/houses/{house_id}")
        def get_house(house_id: str, db: Session = Depends(get_db)):
            return HouseRepository(db).get_by_id(house_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
