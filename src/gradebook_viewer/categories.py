import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Pattern, Sequence, Tuple

OTHER_ID = "other"
OTHER_NAME = "Other"


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    weight: float
    patterns: Tuple[Pattern[str], ...]

    @classmethod
    def build(cls, id: str, name: str, weight: float, patterns: Iterable[str]) -> "Category":
        return cls(id=id, name=name, weight=float(weight), patterns=tuple(re.compile(p, re.IGNORECASE) for p in patterns))

    def matches(self, column: str) -> bool:
        lowered = column.lower()
        return any(pattern.search(lowered) for pattern in self.patterns)

    def to_dict(self) -> Dict[str, object]:
        return {"id": self.id, "name": self.name, "weight": self.weight, "patterns": [p.pattern for p in self.patterns]}


# Order is priority: "Case Study Final" must reach case_study before exams sees "final".
DEFAULT_CATEGORIES: Tuple[Category, ...] = (
    Category.build("case_study", "Case Study", 40, [r"case\s*study"]),
    Category.build("exams", "Exams (Midterm and Final)", 10, [r"\bmidterm\b", r"\bfinal\b", r"\bexam\b"]),
    Category.build(
        "practical_exercises",
        "Practical Exercises",
        35,
        [r"^\s*practical\s*exercises?\b", r"\bpractical\b", r"\bexercise\b", r"\blab\b"],
    ),
    Category.build(
        "class_activities",
        "Class Activities",
        15,
        [
            r"\bactivity\b",
            r"\bdiscussion\b",
            r"graded\s*discussion",
            r"class\s*participation",
            r"attendance",
            r"\bquiz(z|zes)?\b",
            r"threat\s*model",
            r"authentication",
            r"data\s*validation",
        ],
    ),
)


def classify_column(column: str, categories: Sequence[Category] = DEFAULT_CATEGORIES) -> str:
    for category in categories:
        if category.matches(column):
            return category.id
    return OTHER_ID


def category_ids(categories: Sequence[Category] = DEFAULT_CATEGORIES) -> List[str]:
    return [category.id for category in categories] + [OTHER_ID]


def category_name(category_id: str, categories: Sequence[Category] = DEFAULT_CATEGORIES) -> str:
    return next((c.name for c in categories if c.id == category_id), OTHER_NAME)


def normalized_weights(categories: Sequence[Category] = DEFAULT_CATEGORIES) -> Dict[str, float]:
    """Scale declared weights so the named categories sum to 100."""
    total = sum(category.weight for category in categories)
    weights = {category.id: (category.weight * 100 / total if total > 0 else 0.0) for category in categories}
    weights[OTHER_ID] = 0.0
    return weights


def group_columns(columns: Iterable[str], categories: Sequence[Category] = DEFAULT_CATEGORIES) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {category_id: [] for category_id in category_ids(categories)}
    for column in columns:
        groups[classify_column(column, categories)].append(column)
    return groups


def _parse_category(raw: object) -> Category:
    if not isinstance(raw, dict):
        raise ValueError("Each category must be an object with id, name, weight and patterns")
    missing = [key for key in ("id", "name", "weight", "patterns") if key not in raw]
    if missing:
        raise ValueError(f"Category missing fields: {', '.join(missing)}")

    category_id = str(raw["id"]).strip()
    if not category_id or category_id == OTHER_ID:
        raise ValueError(f"Invalid category id: {raw['id']!r}")
    weight = raw["weight"]
    if isinstance(weight, bool) or not isinstance(weight, (int, float)) or weight < 0:
        raise ValueError(f"Category '{category_id}' weight must be a non-negative number")
    patterns = raw["patterns"]
    if not isinstance(patterns, list) or not patterns:
        raise ValueError(f"Category '{category_id}' needs at least one pattern")
    try:
        return Category.build(category_id, str(raw["name"]).strip(), weight, [str(p) for p in patterns])
    except re.error as exc:
        raise ValueError(f"Category '{category_id}' has an invalid pattern: {exc}") from exc


def load_category_config(path: Path) -> Tuple[Category, ...]:
    if not path.exists():
        return DEFAULT_CATEGORIES

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list) or not raw:
        raise ValueError("Category config JSON must be a non-empty list of categories")

    categories = tuple(_parse_category(entry) for entry in raw)
    ids = [category.id for category in categories]
    if len(set(ids)) != len(ids):
        raise ValueError("Category ids must be unique")
    return categories


def save_category_config(categories: Sequence[Category], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([c.to_dict() for c in categories], indent=2, ensure_ascii=False), encoding="utf-8")
    return path
