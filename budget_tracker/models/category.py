from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: int
    name: str
    color_hex: str = "#888888"
    is_system: bool = False
