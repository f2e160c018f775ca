"""
Example record sets for demos and tests.

    - build_example_org_chart(): employees referencing their manager
    - build_example_catalog(): products referencing a category object
"""
from typing import Any, Dict, List


def build_example_org_chart(teams: int = 2, members_per_team: int = 3) -> List[Dict[str, Any]]:
    """
    Flat employee records forming one tree per department.

    Each department has a head (parent None), a lead per team reporting
    to the head and members reporting to their lead.
    Records are listed children-first so building the graph has to
    look ahead for parents.
    """
    records: List[Dict[str, Any]] = []
    next_id = 1
    heads = []
    for dept in ("Engineering", "Operations"):
        head = {"id": next_id, "name": f"Head of {dept}", "dept": dept, "salary": 9000, "parent": None}
        heads.append(head)
        next_id += 1
        for t in range(1, teams + 1):
            lead = {
                "id": next_id,
                "name": f"{dept} Lead {t}",
                "dept": dept,
                "salary": 7000,
                "parent": {"id": head["id"]},
            }
            next_id += 1
            for m in range(1, members_per_team + 1):
                records.append({
                    "id": next_id,
                    "name": f"{dept} Member {t}.{m}",
                    "dept": dept,
                    "salary": 5000 + 100 * m,
                    "parent": {"id": lead["id"]},
                })
                next_id += 1
            records.append(lead)
    records.extend(heads)
    return records


def build_example_catalog() -> List[Dict[str, Any]]:
    """Products with an embedded category object (or none)."""
    books = {"id": "c1", "label": "Books"}
    games = {"id": "c2", "label": "Games"}
    return [
        {"sku": "p1", "price": 12.5, "category": books},
        {"sku": "p2", "price": 30.0, "category": games},
        {"sku": "p3", "price": 8.0, "category": dict(books)},
        {"sku": "p4", "price": 5.0, "category": None},
    ]
