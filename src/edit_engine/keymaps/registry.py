"""Keymap registry: the set of known actions and the strokes bound to them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from edit_engine.runtime.telemetry import span

from .models import ActionRef, Binding, KeyStroke


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    signatures: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Two bindings on one stroke could both fire under the same flags."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        ids = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"'{binding.key_signature}' for '{binding.id}' is already taken by {ids}"
        )


class KeymapRegistry:
    """Actions by id plus bindings grouped per stroke token.

    Every change to the bindings bumps ``revision()`` so hosts can cache
    rendered key hints.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._by_token: Dict[str, List[str]] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        if action_id not in self._actions:
            raise KeyError(f"Action '{action_id}' is not registered")
        return self._actions[action_id]

    def get_binding(self, binding_id: str) -> Binding:
        if binding_id not in self._bindings:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return self._bindings[binding_id]

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts whatever it would shadow."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "key": binding.key_signature},
        ) as handle:
            if binding.action_id not in self._actions:
                handle.add_metadata("missing_action", binding.action_id)
                raise KeyError(
                    f"Binding '{binding.id}' targets unknown action '{binding.action_id}'"
                )
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            conflicts = self.detect_conflicts(binding, ignore=(binding.id,))
            if conflicts and not replace:
                handle.add_metadata("conflicts", ",".join(b.id for b in conflicts))
                raise KeymapConflictError(binding, conflicts)

            for stale in [*conflicts, self._bindings.get(binding.id)]:
                if stale is not None:
                    self._drop(stale)
            self._add(binding)
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is not None:
            self._drop(binding)
        return binding

    def rebind(self, binding_id: str, stroke: KeyStroke | str) -> Binding:
        """Move an existing binding to another stroke, keeping its action."""

        current = self.get_binding(binding_id)
        if isinstance(stroke, str):
            stroke = KeyStroke.parse(stroke)
        moved = replace(current, stroke=stroke)
        conflicts = self.detect_conflicts(moved, ignore=(binding_id,))
        if conflicts:
            raise KeymapConflictError(moved, conflicts)
        self._drop(current)
        self._add(moved)
        return moved

    def iter_bindings(self, signature: Optional[str] = None) -> Iterator[Binding]:
        if signature is None:
            yield from self._bindings.values()
            return
        for binding_id in self._by_token.get(signature, ()):
            yield self._bindings[binding_id]

    def strokes_for(self, action_id: str) -> tuple[str, ...]:
        """Tokens bound to ``action_id``, for menus and status-line hints."""

        return tuple(
            sorted(
                binding.key_signature
                for binding in self._bindings.values()
                if binding.action_id == action_id
            )
        )

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            signatures=tuple(sorted(self._by_token)),
        )

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] = ()
    ) -> list[Binding]:
        return [
            existing
            for existing in self.iter_bindings(binding.key_signature)
            if existing.id not in ignore and binding.shadows(existing)
        ]

    def _add(self, binding: Binding) -> None:
        self._bindings[binding.id] = binding
        ids = self._by_token.setdefault(binding.key_signature, [])
        ids.append(binding.id)
        ids.sort()
        self._revision += 1

    def _drop(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        ids = self._by_token.get(binding.key_signature, [])
        if binding.id in ids:
            ids.remove(binding.id)
        if not ids:
            self._by_token.pop(binding.key_signature, None)
        self._revision += 1


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
