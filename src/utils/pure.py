import dataclasses
from typing import Any, Iterable, List, Tuple


def markdown_attr_table(pairs: Iterable[Tuple[str, Any]]) -> str:
    """Two-column `Attribute | Value` markdown table; None renders as a dash."""
    lines = ["| Attribute | Value |", "| :--- | :--- |"]
    for key, value in pairs:
        text = "-" if value is None else str(value).replace("|", "\\|")
        lines.append(f"| {key} | {text} |")
    return "\n".join(lines)


def record_row(record) -> List[str]:
    """Dataclass record flattened to display strings, in field order."""
    return ["" if v is None else str(v) for v in dataclasses.astuple(record)]
