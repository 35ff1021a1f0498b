from types import SimpleNamespace

import pytest

from app.services.utils.material_utils import (
    calculate_material_status,
    format_unit_code,
    matches_requirement,
    normalize_finish,
    pool_for_technology,
    relevant_pool,
)


@pytest.mark.parametrize(
    "technology,pool",
    [
        ("FDM", "spool"),
        ("SLA", "resin"),
        ("DLP", "resin"),
        ("SLS", "powder"),
        ("MJF", "powder"),
        ("DMLS", "powder"),
    ],
)
def test_pool_for_technology(technology, pool):
    assert pool_for_technology(technology) == pool


def test_unknown_technology_has_no_relevant_pool():
    assert relevant_pool("CNC") is None
    assert relevant_pool("EBM") == "powder"


@pytest.mark.parametrize(
    "used,total,status",
    [
        (0, 1000, "New"),
        (100, 1000, "Active"),
        (700, 1000, "Low"),
        (900, 1000, "Critical"),
        (950, 1000, "Critical"),
        (1000, 1000, "Empty"),
        (0, 0, "Empty"),
        (14.5, 15, "Critical"),
    ],
)
def test_calculate_material_status(used, total, status):
    assert calculate_material_status(used, total) == status


def test_missing_finish_reads_as_standard():
    assert normalize_finish(None) == "Standard"
    assert normalize_finish("") == "Standard"
    assert normalize_finish("Matte") == "Matte"


def test_requirement_match_is_exact():
    unit = SimpleNamespace(material="PLA", color="#FF0000", finish="Matte")
    assert matches_requirement(unit, "PLA", "#FF0000", "Matte")
    assert not matches_requirement(unit, "PLA", "#ff0000", "Matte")
    assert not matches_requirement(unit, "pla", "#FF0000", "Matte")
    assert not matches_requirement(unit, "PLA", "#FF0000", "Glossy")


def test_resin_without_finish_matches_standard():
    unit = SimpleNamespace(material="Standard", color="#808080", finish=None)
    assert matches_requirement(unit, "Standard", "#808080", None)
    assert matches_requirement(unit, "Standard", "#808080", "Standard")


def test_format_unit_code():
    assert format_unit_code("spool", 7) == "SP007"
    assert format_unit_code("resin", 12) == "RS012"
    assert format_unit_code("powder", 101) == "PW101"
