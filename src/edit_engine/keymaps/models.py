"""Key strokes, context clauses, actions and the bindings tying them together."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

MODIFIERS = ("alt", "ctrl", "meta", "shift")


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """One key plus the modifiers held with it.

    Modifiers are lower-cased, de-duplicated and kept in alphabetical order
    so that ``shift+ctrl+z`` and ``ctrl+shift+z`` share one ``token``.
    Key names are case sensitive: ``a`` and ``A`` are different strokes,
    named keys are upper case (``LEFT``, ``ESC``, ``F3``).
    """

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("key cannot be empty")
        held = {modifier.strip().lower() for modifier in self.modifiers} - {""}
        unknown = held.difference(MODIFIERS)
        if unknown:
            raise ValueError(f"Unknown modifiers {sorted(unknown)}")
        object.__setattr__(self, "modifiers", tuple(m for m in MODIFIERS if m in held))

    @property
    def token(self) -> str:
        return "+".join((*self.modifiers, self.key))

    @classmethod
    def parse(cls, token: str) -> "KeyStroke":
        """``"ctrl+shift+z"`` -> ``KeyStroke("z", ("ctrl", "shift"))``."""

        *modifiers, key = token.strip().split("+")
        return cls(key, tuple(modifiers))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """Editor flag a binding requires (``has_selection``) or forbids (``!has_selection``)."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        return cls(text.lstrip("!"), not negated)

    def evaluate(self, flags: Mapping[str, bool]) -> bool:
        return bool(flags.get(self.flag, False)) == self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler invoked as ``handler(context, match)``."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


def _clauses(when: Iterable[WhenClause | str]) -> tuple[WhenClause, ...]:
    return tuple(
        clause if isinstance(clause, WhenClause) else WhenClause.parse(clause)
        for clause in when
    )


@dataclass(frozen=True, slots=True)
class Binding:
    """A stroke that runs ``action_id`` while every ``when`` clause holds."""

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    tags: tuple[str, ...] = ()
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        object.__setattr__(self, "when", _clauses(self.when))
        tags = (tag.strip() for tag in self.tags)
        object.__setattr__(self, "tags", tuple(dict.fromkeys(t for t in tags if t)))

    @property
    def key_signature(self) -> str:
        return self.stroke.token

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, flags: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(flags) for clause in self.when)

    def shadows(self, other: "Binding") -> bool:
        """True when both bindings share a stroke and would fire for the same flags.

        Two unconditional bindings always clash, as do two with identical
        clauses. A conditional binding layered over an unconditional one is a
        deliberate override, and contradicting clauses never meet.
        """

        if self.key_signature != other.key_signature:
            return False
        mine, theirs = self.when_map, other.when_map
        if any(flag in theirs and theirs[flag] != value for flag, value in mine.items()):
            return False
        return dict(mine) == dict(theirs)


__all__ = [
    "MODIFIERS",
    "KeyStroke",
    "WhenClause",
    "ActionRef",
    "Binding",
]
