from __future__ import annotations

from typing import Optional

from app.core.config import settings

MATERIAL_KINDS = ["spool", "resin", "powder"]
TECHNOLOGIES = ["FDM", "SLA", "SLS", "DLP", "MJF", "EBM", "DMLS"]

UNIT_CODE_PREFIXES = {"spool": "SP", "resin": "RS", "powder": "PW"}


def pool_for_technology(technology: str) -> str:
    """Stock pool a printer draws from: FDM spools, SLA/DLP resins, powders otherwise."""
    if technology == "FDM":
        return "spool"
    if technology in ("SLA", "DLP"):
        return "resin"
    return "powder"


def relevant_pool(technology: str) -> Optional[str]:
    """Like ``pool_for_technology`` but None for technologies the farm does not know."""
    if technology not in TECHNOLOGIES:
        return None
    return pool_for_technology(technology)


def normalize_finish(finish: Optional[str]) -> str:
    return finish or settings.default_finish


def calculate_material_status(used: float, total: float) -> str:
    if total <= 0:
        return "Empty"
    if used >= total:
        return "Empty"
    remaining_percent = (total - used) / total * 100
    if remaining_percent <= settings.critical_stock_threshold:
        return "Critical"
    if remaining_percent <= settings.low_stock_threshold:
        return "Low"
    if used == 0:
        return "New"
    return "Active"


def matches_requirement(unit, material: str, color: Optional[str], finish: Optional[str]) -> bool:
    """Exact, case-sensitive match on (material, color, finish)."""
    return (
        unit.material == material
        and unit.color == color
        and normalize_finish(unit.finish) == normalize_finish(finish)
    )


def format_unit_code(kind: str, number: int) -> str:
    return f"{UNIT_CODE_PREFIXES[kind]}{number:03d}"
