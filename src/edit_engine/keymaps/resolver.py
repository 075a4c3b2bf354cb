"""Key stroke resolution against the registry's active bindings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from edit_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    """Resolved binding paired with its action."""

    binding: Binding
    action: ActionRef


class KeymapResolver:
    """Picks the binding for a stroke token given the current context flags.

    Among the bindings whose ``when`` clauses hold, the highest priority wins,
    then the one with the most clauses, then the lowest id.
    """

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self._registry = registry
        self._logger_name = logger_name

    def resolve(
        self, token: str, *, context: Optional[Mapping[str, bool]] = None
    ) -> Optional[ResolutionMatch]:
        ctx = context or {}
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"key": token},
        ) as handle:
            candidates = [
                binding
                for binding in self._registry.iter_bindings(token)
                if binding.allows(ctx)
            ]
            if not candidates:
                handle.add_metadata("status", "miss")
                return None

            candidates.sort(key=lambda b: (-b.priority, -len(b.when), b.id))
            binding = candidates[0]
            handle.add_metadata("status", "match")
            handle.add_metadata("binding_id", binding.id)
            return ResolutionMatch(
                binding=binding, action=self._registry.get_action(binding.action_id)
            )


__all__ = ["KeymapResolver", "ResolutionMatch"]
