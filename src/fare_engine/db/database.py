"""Database engine initialization and connection management."""

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from .schema import Base, EngineMetadata, VehicleType

DEFAULT_VEHICLE_TYPES = [
    ("car", "Car"),
    ("motorcycle", "Motorcycle"),
    ("bicycle", "Bicycle"),
    ("truck", "Truck"),
]


def init_database(db_path: str) -> sessionmaker[Any]:
    """Initialize database and return session factory."""
    # Ensure parent directory exists
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)

    session_maker = sessionmaker(bind=engine)

    with session_maker() as session:
        schema_version = session.get(EngineMetadata, "schema_version")
        if not schema_version:
            session.add(EngineMetadata(key="schema_version", value="1.0.0"))

        existing = set(session.scalars(select(VehicleType.name)))
        session.add_all(
            VehicleType(name=name, display_name=display_name)
            for name, display_name in DEFAULT_VEHICLE_TYPES
            if name not in existing
        )
        session.commit()

    return session_maker
