# dashboard/layouts.py
"""Built-in widget layout used until a user saves their own."""
import copy

DEFAULT_LAYOUT = [
    {
        "i": "financial-overview",
        "x": 0, "y": 0, "w": 8, "h": 4,
        "min_w": 4, "min_h": 3,
        "is_draggable": True, "is_resizable": True,
    },
    {
        "i": "flow-time-dashboard",
        "x": 0, "y": 4, "w": 8, "h": 6,
        "min_w": 4, "min_h": 4,
        "is_draggable": True, "is_resizable": True,
    },
    {
        "i": "subscriptions",
        "x": 8, "y": 0, "w": 4, "h": 3,
        "min_w": 3, "min_h": 2,
        "is_draggable": True, "is_resizable": True,
    },
    {
        "i": "shopping-lists",
        "x": 8, "y": 3, "w": 4, "h": 4,
        "min_w": 3, "min_h": 3,
        "is_draggable": True, "is_resizable": True,
    },
]


def default_layout() -> list[dict]:
    return copy.deepcopy(DEFAULT_LAYOUT)
