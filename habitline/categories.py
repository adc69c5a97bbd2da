"""
Category display styles.

Closed mapping from HabitCategory to its timeline colors. Every category must
have an entry; the module refuses to import otherwise.
"""

from dataclasses import dataclass

from habitline.templates import HabitCategory


@dataclass(frozen=True)
class CategoryStyle:
    text_class: str
    bg_class: str
    hex: str

    def to_record(self) -> dict:
        return {"text_class": self.text_class, "bg_class": self.bg_class, "hex": self.hex}


CATEGORY_STYLES: dict[HabitCategory, CategoryStyle] = {
    HabitCategory.MIND: CategoryStyle("text-blue-300", "bg-blue-900/50", "#93c5fd"),
    HabitCategory.BODY: CategoryStyle("text-red-300", "bg-red-900/50", "#fca5a5"),
    HabitCategory.HEALTH: CategoryStyle("text-green-300", "bg-green-900/50", "#86efac"),
    HabitCategory.SPIRITUALITY: CategoryStyle("text-purple-300", "bg-purple-900/50", "#d8b4fe"),
    HabitCategory.FINANCES: CategoryStyle("text-yellow-300", "bg-yellow-900/50", "#fde047"),
    HabitCategory.SOCIAL: CategoryStyle("text-pink-300", "bg-pink-900/50", "#f9a8d4"),
    HabitCategory.LEISURE: CategoryStyle("text-indigo-300", "bg-indigo-900/50", "#a5b4fc"),
}

_missing = [c.value for c in HabitCategory if c not in CATEGORY_STYLES]
if _missing:
    raise RuntimeError(f"CATEGORY_STYLES missing categories: {_missing}")


def style_for(category: HabitCategory | str) -> CategoryStyle:
    return CATEGORY_STYLES[HabitCategory(category)]
