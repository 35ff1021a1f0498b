import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_SAMPLE_DATA", "false")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base, get_db
from app.main import app
from app.models.inventory import MaterialUnit
from app.models.job import ItemGroup, MaterialRequirement, PrintJob
from app.models.printer import Printer


# Fixtures

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    """Session on a fresh in-memory database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    """API client whose requests share the test database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_printer(db):
    def _make(code_name="PRN01", technology="FDM", status="idle", name=None):
        printer = Printer(
            code_name=code_name,
            name=name or code_name,
            technology=technology,
            status=status,
        )
        db.add(printer)
        db.commit()
        return printer

    return _make


@pytest.fixture
def make_unit(db):
    def _make(
        unit_code,
        kind="spool",
        material="PLA",
        color="#000000",
        finish="Matte",
        capacity=1000.0,
        used=0.0,
        status="New",
        assigned_printer_id=None,
        assigned_job_id=None,
    ):
        unit = MaterialUnit(
            unit_code=unit_code,
            kind=kind,
            name=f"{material} {color}",
            material=material,
            color=color,
            finish=finish,
            capacity=capacity,
            used=used,
            status=status,
            assigned_printer_id=assigned_printer_id,
            assigned_job_id=assigned_job_id,
        )
        db.add(unit)
        db.commit()
        return unit

    return _make


@pytest.fixture
def make_job(db):
    def _make(
        job_id,
        technology="FDM",
        estimated_time_min=120,
        deadline=None,
        printer=None,
        start=None,
        hours=None,
        confirmed=False,
        materials=(),
    ):
        job = PrintJob(
            job_id=job_id,
            name=f"Job {job_id}",
            required_technology=technology,
            estimated_time_min=estimated_time_min,
            deadline=deadline,
            status="queued",
            is_confirmed=confirmed,
            item_groups=[
                ItemGroup(
                    quantity=1,
                    materials=[
                        MaterialRequirement(material=m, color=c, finish=f)
                        for m, c, f in materials
                    ],
                )
            ],
        )
        if printer is not None:
            hours = hours if hours is not None else estimated_time_min / 60
            job.printer_id = printer.id
            job.start_time = start
            job.end_time = start + timedelta(hours=hours)
            job.duration_hours = hours
            job.status = "confirmed" if confirmed else "scheduled"
        db.add(job)
        db.commit()
        return job

    return _make
