"""Commands: a tree of named commands carrying flags and positional arguments."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from .args import Args, ArgumentsBase, ValueKind
from .category import (
    CommandCategories,
    CommandCategory,
    FlagCategories,
    VisibleFlagCategory,
    flag_categories_from_flags,
)
from .tracing import tracef

HELP_NAME = "help"

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(text: str) -> bool:
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    raise ValueError(f'strconv.ParseBool: parsing "{escaped}": invalid syntax')


@dataclass(eq=False)
class Flag:
    """A named option.

    A ``kind`` of None makes the flag a boolean switch. With ``multiple`` set,
    each value given is split on ``separator`` and collected into a list.
    """

    name: str
    kind: Optional[ValueKind] = ValueKind.STRING
    aliases: list[str] = field(default_factory=list)
    usage: str = ""
    value: Any = None
    category: str = ""
    required: bool = False
    hidden: bool = False
    local: bool = False
    multiple: bool = False
    separator: str = ","
    config: Any = None
    _current: Any = field(default=None, init=False, repr=False)
    _times: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.value is None:
            if self.multiple:
                self.value = []
            elif self.kind is None:
                self.value = False
            else:
                self.value = self.kind.zero()
        if self.config is None and self.kind is not None:
            self.config = self.kind.default_config()

    def names(self) -> list[str]:
        """Return the flag's name followed by its aliases."""
        return [self.name, *self.aliases]

    def _parse(self, text: str) -> Any:
        if self.kind is None:
            return _parse_bool(text)
        return self.kind.parse(text, self.config)

    def set(self, name: str, text: str) -> None:
        """Set the flag from text given under one of its names."""
        if self.multiple:
            pieces = text.split(self.separator) if self.separator else [text]
            items = [self._parse(piece) for piece in pieces]
            previous = self._current if self._times else []
            self._current = [*previous, *items]
        else:
            self._current = self._parse(text)
        self._times += 1

    def get(self) -> Any:
        """Return the value that was set, or the default."""
        current = self._current if self._times else self.value
        return list(current) if self.multiple else current

    def is_set(self) -> bool:
        return self._times > 0

    def count(self) -> int:
        """Return how many times the flag was set."""
        return self._times

    def is_visible(self) -> bool:
        return not self.hidden

    def is_required(self) -> bool:
        return self.required

    def is_local(self) -> bool:
        return self.local

    def __str__(self) -> str:
        names = ", ".join(("-" if len(n) == 1 else "--") + n for n in self.names())
        return f"{names}\t{self.usage}" if self.usage else names


class RequiredFlagsError(Exception):
    """Raised when required flags were not set."""

    def __init__(self, missing_flags: Iterable[str]) -> None:
        self.missing_flags = list(missing_flags)
        if len(self.missing_flags) == 1:
            message = f'Required flag "{self.missing_flags[0]}" not set'
        else:
            message = f'Required flags "{", ".join(self.missing_flags)}" not set'
        super().__init__(message)


@dataclass(eq=False)
class Command:
    """A command with flags, positional arguments and sub-commands."""

    name: str = ""
    aliases: list[str] = field(default_factory=list)
    usage: str = ""
    usage_text: str = ""
    args_usage: str = ""
    version: str = ""
    description: str = ""
    category: str = ""
    commands: list["Command"] = field(default_factory=list)
    flags: list[Flag] = field(default_factory=list)
    hidden: bool = False
    authors: list[Any] = field(default_factory=list)
    copyright: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    mutually_exclusive_flags: list[Any] = field(default_factory=list)
    arguments: list[Any] = field(default_factory=list)
    invalid_flag_access_handler: Optional[Callable[["Command", str], None]] = None
    parent: Optional["Command"] = field(default=None, repr=False)
    _flag_categories: Optional[FlagCategories] = field(default=None, init=False, repr=False)
    _parsed_args: Args = field(default_factory=Args, init=False, repr=False)

    def __post_init__(self) -> None:
        for sub in self.commands:
            sub.parent = self

    def full_name(self) -> str:
        """Return the names of this command and its ancestors, root first."""
        if self.parent is not None:
            return f"{self.parent.full_name()} {self.name}"
        return self.name

    def command(self, name: str) -> Optional["Command"]:
        """Return the sub-command known by name or alias, if any."""
        return next((sub for sub in self.commands if sub.has_name(name)), None)

    def names(self) -> list[str]:
        return [self.name, *self.aliases]

    def has_name(self, name: str) -> bool:
        return name in self.names()

    def add_command(self, command: "Command") -> None:
        """Attach a sub-command unless it is already attached."""
        if not any(existing is command for existing in self.commands):
            command.parent = self
            self.commands.append(command)

    def root(self) -> "Command":
        return self if self.parent is None else self.parent.root()

    def lineage(self) -> list["Command"]:
        """Return this command and its ancestors, from child to root."""
        result = [self]
        if self.parent is not None:
            result.extend(self.parent.lineage())
        return result

    def _all_flags(self) -> list[Flag]:
        flags = list(self.flags)
        for group in self.mutually_exclusive_flags:
            for members in getattr(group, "flags", group):
                flags.extend(members)
        return flags

    def visible_categories(self) -> list[CommandCategory]:
        """Return the command categories holding at least one visible command."""
        categories = CommandCategories()
        for sub in self.commands:
            categories.add_command(sub.category, sub)
        categories.sort()
        return [category for category in categories.categories() if category.visible_commands()]

    def visible_commands(self) -> list["Command"]:
        return [sub for sub in self.commands if not sub.hidden and sub.name != HELP_NAME]

    def visible_flag_categories(self) -> list[VisibleFlagCategory]:
        if self._flag_categories is None:
            self._flag_categories = flag_categories_from_flags(self._all_flags())
        return self._flag_categories.visible_categories()

    def visible_flags(self) -> list[Flag]:
        return [flag for flag in self._all_flags() if flag.is_visible()]

    def visible_persistent_flags(self) -> list[Flag]:
        """Return the root's visible flags that are not local."""
        return [
            flag
            for flag in self.root().flags
            if not flag.is_local() and flag.is_visible()
        ]

    def _on_invalid_flag(self, name: str) -> None:
        for command in self.lineage():
            if command.invalid_flag_access_handler is not None:
                command.invalid_flag_access_handler(command, name)
                return

    def lookup_flag(self, name: str) -> Optional[Flag]:
        """Find a flag by name in this command or its ancestors."""
        for command in self.lineage():
            for flag in command._all_flags():
                if name in flag.names():
                    tracef("flag found for name %r (cmd=%r)", name, command.name)
                    return flag
        tracef("flag NOT found for name %r (cmd=%r)", name, self.name)
        self._on_invalid_flag(name)
        return None

    def check_required_flags(self) -> None:
        """Raise RequiredFlagsError if this command or an ancestor misses required flags."""
        for command in self.lineage():
            missing = [
                flag.names()[0]
                for flag in command._all_flags()
                if flag.is_required() and not flag.is_set()
            ]
            if missing:
                raise RequiredFlagsError(missing)

    def num_flags(self) -> int:
        return sum(1 for flag in self._all_flags() if flag.is_set())

    def set(self, name: str, value: str) -> None:
        """Set a flag of this command or an ancestor from text."""
        flag = self.lookup_flag(name)
        if flag is None:
            raise ValueError(f"no such flag -{name}")
        flag.set(name, value)

    def is_set(self, name: str) -> bool:
        flag = self.lookup_flag(name)
        return flag is not None and flag.is_set()

    def local_flag_names(self) -> list[str]:
        """Return the names, without duplicates, of this command's flags that are set."""
        names = [n for flag in self._all_flags() if flag.is_set() for n in flag.names()]
        return list(dict.fromkeys(names))

    def flag_names(self) -> list[str]:
        """Return the set flag names of the ancestors and then this command."""
        names = self.local_flag_names()
        if self.parent is not None:
            names = self.parent.flag_names() + names
        return names

    def count(self, name: str) -> int:
        flag = self.lookup_flag(name)
        return flag.count() if flag is not None else 0

    def value(self, name: str) -> Any:
        flag = self.lookup_flag(name)
        return flag.get() if flag is not None else None

    def args(self) -> Args:
        return self._parsed_args

    def narg(self) -> int:
        return len(self._parsed_args)

    def parse_arguments(self, args: Sequence[str]) -> Args:
        """Feed positional arguments to the declared arguments and keep what is left."""
        remaining = list(args)
        for argument in self.arguments:
            remaining = argument.parse(remaining)
        self._parsed_args = Args(remaining)
        return Args(remaining)

    def arg_value(self, name: str) -> Any:
        """Return the value of the named positional argument, or None."""
        for argument in self.arguments:
            if argument.has_name(name):
                return argument.get()
        return None

    def _typed_arg(self, name: str, kind: ValueKind, multiple: bool) -> Any:
        for argument in self.arguments:
            if argument.has_name(name):
                if argument.kind is kind and isinstance(argument, ArgumentsBase) == multiple:
                    return argument.get()
                break
        return None if multiple else kind.zero()

    def string_arg(self, name: str) -> str:
        return self._typed_arg(name, ValueKind.STRING, False)

    def string_args(self, name: str) -> Optional[list[str]]:
        return self._typed_arg(name, ValueKind.STRING, True)

    def int_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.INT, False)

    def int_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.INT, True)

    def int8_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.INT8, False)

    def int8_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.INT8, True)

    def int16_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.INT16, False)

    def int16_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.INT16, True)

    def int32_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.INT32, False)

    def int32_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.INT32, True)

    def int64_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.INT64, False)

    def int64_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.INT64, True)

    def uint_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.UINT, False)

    def uint_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.UINT, True)

    def uint8_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.UINT8, False)

    def uint8_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.UINT8, True)

    def uint16_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.UINT16, False)

    def uint16_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.UINT16, True)

    def uint32_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.UINT32, False)

    def uint32_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.UINT32, True)

    def uint64_arg(self, name: str) -> int:
        return self._typed_arg(name, ValueKind.UINT64, False)

    def uint64_args(self, name: str) -> Optional[list[int]]:
        return self._typed_arg(name, ValueKind.UINT64, True)

    def float_arg(self, name: str) -> float:
        return self._typed_arg(name, ValueKind.FLOAT64, False)

    def float_args(self, name: str) -> Optional[list[float]]:
        return self._typed_arg(name, ValueKind.FLOAT64, True)

    def float32_arg(self, name: str) -> float:
        return self._typed_arg(name, ValueKind.FLOAT32, False)

    def float32_args(self, name: str) -> Optional[list[float]]:
        return self._typed_arg(name, ValueKind.FLOAT32, True)

    def float64_arg(self, name: str) -> float:
        return self._typed_arg(name, ValueKind.FLOAT64, False)

    def float64_args(self, name: str) -> Optional[list[float]]:
        return self._typed_arg(name, ValueKind.FLOAT64, True)

    def timestamp_arg(self, name: str) -> Any:
        return self._typed_arg(name, ValueKind.TIMESTAMP, False)

    def timestamp_args(self, name: str) -> Optional[list[Any]]:
        return self._typed_arg(name, ValueKind.TIMESTAMP, True)