"""
Reference Data Routes — GET /api/checklist, GET /api/framework-data

Static data the client needs to render the checklist and link mitigations.
"""

from __future__ import annotations

from fastapi import APIRouter

from govcheck.core.catalog import CATEGORY_INFO, load_catalog, questions_by_category
from govcheck.core.frameworks import framework_references, mitigation_urls

router = APIRouter()


@router.get("/api/checklist")
async def checklist():
    """Checklist questions grouped by risk category."""
    grouped = questions_by_category(load_catalog())
    return {
        "categories": [
            {
                "key": category.value,
                "title": CATEGORY_INFO[category]["title"],
                "description": CATEGORY_INFO[category]["description"],
                "questions": [
                    {
                        "id": q.id,
                        "question": q.question,
                        "purpose": q.purpose,
                        "weight": q.weight,
                    }
                    for q in questions
                ],
            }
            for category, questions in grouped.items()
        ],
        "answers": ["yes", "no", "na"],
    }


@router.get("/api/framework-data")
async def framework_data():
    """Mitigation documentation links and external framework references."""
    return {
        "mitigationUrls": mitigation_urls(),
        "frameworkReferences": framework_references(),
    }
