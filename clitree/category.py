"""Grouping of commands and flags into named categories for help output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional


@dataclass
class CommandCategory:
    """A named group of commands."""

    name: str
    commands: list = field(default_factory=list)

    def visible_commands(self) -> list:
        """Return the commands that are not hidden."""
        return [command for command in self.commands if not getattr(command, "hidden", False)]


class CommandCategories:
    """An ordered collection of command categories."""

    def __init__(self, categories: Iterable[CommandCategory] = ()) -> None:
        self._categories = list(categories)

    def add_command(self, category: str, command: Any) -> None:
        """Add a command to a category, creating the category if needed."""
        for existing in self._categories:
            if existing.name == category:
                existing.commands.append(command)
                return
        self._categories.append(CommandCategory(category, [command]))

    def categories(self) -> list[CommandCategory]:
        return list(self._categories)

    def sort(self) -> None:
        """Order categories by name, ignoring case first."""
        self._categories.sort(key=lambda category: (category.name.lower(), category.name))

    def __iter__(self) -> Iterator[CommandCategory]:
        return iter(list(self._categories))

    def __len__(self) -> int:
        return len(self._categories)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CommandCategories):
            return self._categories == other._categories
        return NotImplemented

    def __repr__(self) -> str:
        return f"CommandCategories({self._categories!r})"


def _is_visible(flag: Any) -> bool:
    check = getattr(flag, "is_visible", None)
    return bool(check()) if callable(check) else False


def _category_of(flag: Any) -> Optional[str]:
    category = getattr(flag, "category", None)
    return category if isinstance(category, str) else None


@dataclass
class VisibleFlagCategory:
    """A named group of flags, keyed by their string form."""

    name: str
    members: dict = field(default_factory=dict)

    def flags(self) -> list:
        """Return the visible flags, sorted by their string form."""
        return [self.members[key] for key in sorted(self.members) if _is_visible(self.members[key])]


class FlagCategories:
    """Flag categories keyed by name."""

    def __init__(self) -> None:
        self._categories: dict[str, VisibleFlagCategory] = {}

    def add_flag(self, category: str, flag: Any) -> None:
        """Add a flag to a category, creating the category if needed."""
        group = self._categories.setdefault(category, VisibleFlagCategory(category))
        group.members[str(flag)] = flag

    def visible_categories(self) -> list[VisibleFlagCategory]:
        """Return the categories sorted by name."""
        return [self._categories[name] for name in sorted(self._categories)]


def flag_categories_from_flags(flags: Iterable[Any]) -> FlagCategories:
    """Group visible flags by category; uncategorized ones go under "" when any are categorized."""
    flags = list(flags)
    result = FlagCategories()
    categorized = False

    for flag in flags:
        category = _category_of(flag)
        if category and _is_visible(flag):
            result.add_flag(category, flag)
            categorized = True

    if categorized:
        for flag in flags:
            if _category_of(flag) == "" and _is_visible(flag):
                result.add_flag("", flag)

    return result