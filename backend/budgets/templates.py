from __future__ import annotations

from typing import Dict, List, Optional

# Percentages of each template add up to 100.
BUDGET_TEMPLATES: List[dict] = [
    {
        "id": "basic-budget",
        "name": "Basic Monthly Budget",
        "description": "A simple budget covering essential expenses",
        "categories": [
            {"name": "Housing", "percentage": 30, "color": "#ff6b6b"},
            {"name": "Food & Dining", "percentage": 15, "color": "#4ecdc4"},
            {"name": "Transportation", "percentage": 12, "color": "#45b7d1"},
            {"name": "Bills & Utilities", "percentage": 8, "color": "#feca57"},
            {"name": "Healthcare", "percentage": 5, "color": "#ff9ff3"},
            {"name": "Entertainment", "percentage": 10, "color": "#96ceb4"},
            {"name": "Shopping", "percentage": 8, "color": "#a29bfe"},
            {"name": "Savings", "percentage": 12, "color": "#00d2d3"},
        ],
    },
    {
        "id": "50-30-20-budget",
        "name": "50/30/20 Budget",
        "description": "50% needs, 30% wants, 20% savings and debt repayment",
        "categories": [
            {"name": "Housing", "percentage": 25, "color": "#ff6b6b"},
            {"name": "Food & Dining", "percentage": 12, "color": "#4ecdc4"},
            {"name": "Transportation", "percentage": 8, "color": "#45b7d1"},
            {"name": "Bills & Utilities", "percentage": 5, "color": "#feca57"},
            {"name": "Entertainment", "percentage": 15, "color": "#96ceb4"},
            {"name": "Shopping", "percentage": 10, "color": "#a29bfe"},
            {"name": "Travel", "percentage": 5, "color": "#e67e22"},
            {"name": "Savings", "percentage": 15, "color": "#00d2d3"},
            {"name": "Debt Payment", "percentage": 5, "color": "#ff9f43"},
        ],
    },
    {
        "id": "zero-based-budget",
        "name": "Zero-Based Budget",
        "description": "Every dollar is allocated to a specific purpose",
        "categories": [
            {"name": "Housing", "percentage": 28, "color": "#ff6b6b"},
            {"name": "Food & Dining", "percentage": 14, "color": "#4ecdc4"},
            {"name": "Transportation", "percentage": 10, "color": "#45b7d1"},
            {"name": "Bills & Utilities", "percentage": 8, "color": "#feca57"},
            {"name": "Healthcare", "percentage": 4, "color": "#ff9ff3"},
            {"name": "Entertainment", "percentage": 8, "color": "#96ceb4"},
            {"name": "Shopping", "percentage": 5, "color": "#a29bfe"},
            {"name": "Insurance", "percentage": 3, "color": "#fdcb6e"},
            {"name": "Emergency Fund", "percentage": 10, "color": "#e17055"},
            {"name": "Savings & Investments", "percentage": 10, "color": "#00d2d3"},
        ],
    },
    {
        "id": "student-budget",
        "name": "Student Budget",
        "description": "Budget tailored for students with limited income",
        "categories": [
            {"name": "Housing", "percentage": 40, "color": "#ff6b6b"},
            {"name": "Food & Dining", "percentage": 20, "color": "#4ecdc4"},
            {"name": "Transportation", "percentage": 10, "color": "#45b7d1"},
            {"name": "Education", "percentage": 15, "color": "#2ecc71"},
            {"name": "Entertainment", "percentage": 8, "color": "#96ceb4"},
            {"name": "Healthcare", "percentage": 4, "color": "#ff9ff3"},
            {"name": "Emergency Fund", "percentage": 3, "color": "#e17055"},
        ],
    },
]

_BY_ID: Dict[str, dict] = {t["id"]: t for t in BUDGET_TEMPLATES}


def get_template(template_id: str) -> Optional[dict]:
    return _BY_ID.get(template_id)


def allocate(template: dict, total_budget: float) -> List[dict]:
    """Split ``total_budget`` across the template's categories by percentage."""
    return [
        {
            "name": c["name"],
            "percentage": c["percentage"],
            "amount": round(total_budget * c["percentage"] / 100, 2),
        }
        for c in template["categories"]
    ]
