# tests/conftest.py

from datetime import datetime

import pytest
import yaml

from onelook.assignments.models import Assignment, Source
from onelook.assignments.service import AssignmentBoard
from onelook.assignments.stores import MemoryStore, SqlStore
from onelook.core import db

NOW = datetime(2025, 1, 1, 8, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_store(tmp_path):
    db.init_db(db_url=f"sqlite:///{tmp_path / 'test.db'}")
    yield SqlStore()
    db.close_db()


@pytest.fixture
def sample_assignments():
    return [
        Assignment("a3", "PA1: Linked Lists", "CIS 121", Source.GRADESCOPE, "2025-01-03T10:00"),
        Assignment("a1", "Reading Quiz 1", "ESE 5420", Source.CANVAS, "2025-01-01T09:00"),
        Assignment(
            "a2", "HW1: Probability Review", "CIS 519", Source.CANVAS, "2025-01-02T08:00",
            "https://canvas.example/hw1",
        ),
        Assignment("a4", "Week 2 discussion post", "PHIL 101", Source.PIAZZA, "2025-01-20T23:59"),
    ]


@pytest.fixture
def board(memory_store, sample_assignments):
    memory_store.save(sample_assignments)
    board = AssignmentBoard(memory_store, now_fn=lambda: NOW)
    board.load()
    return board


@pytest.fixture
def config_file(tmp_path):
    """Config pointing every path into tmp_path."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({
        "storage": {
            "backend": "sqlite",
            "key": "assignments_v1",
            "path": str(tmp_path / "onelook.db"),
            "dir": str(tmp_path / "data"),
        },
        "view": {"next7_only": False, "source": "All"},
        "logging": {"level": "WARNING"},
    }))
    return path
