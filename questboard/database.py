"""
Database connection and session management for Questboard
"""
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from questboard.core.config import settings

if settings.is_sqlite:
    # SQLite connections are shared with the request thread pool
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=settings.DATABASE_ECHO
    )
else:
    # Create database engine with connection pooling
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,      # Test connections before using
        pool_size=10,            # Connection pool size
        max_overflow=20,         # Overflow connections allowed
        echo=settings.DATABASE_ECHO
    )

# Session factory for creating database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for all models
Base = declarative_base()


def get_db():
    """
    Dependency for getting database session in endpoints

    Usage in FastAPI endpoints:
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables"""
    # Register every model with Base before creating tables
    import questboard.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
