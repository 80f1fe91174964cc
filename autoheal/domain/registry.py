"""Semantic fields: named candidate lists plus value rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from autoheal.core.errors import ValidationFailure
from autoheal.core.healing import AutoHealing
from autoheal.core.types import ResolutionOutcome

Validator = Callable[[Any], bool]
Normalizer = Callable[[Any], str]


@dataclass(frozen=True)
class SemanticField:
    name: str
    candidates: tuple[str, ...]
    validator: Validator | None = None
    normalizer: Normalizer | None = None

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError(f"field {self.name!r} needs at least one candidate")
        # Accept any sequence at construction time, store a tuple
        object.__setattr__(self, "candidates", tuple(self.candidates))


class FieldRegistry:
    """name → SemanticField. Validation and normalization happen in ``prepare``."""

    def __init__(self, fields: Iterable[SemanticField] = ()) -> None:
        self._fields: dict[str, SemanticField] = {}
        for f in fields:
            self.register(f)

    def register(self, field: SemanticField) -> None:
        self._fields[field.name] = field

    def get(self, name: str) -> SemanticField:
        try:
            return self._fields[name]
        except KeyError:
            raise KeyError(f"Unknown semantic field: {name!r}") from None

    def candidates(self, name: str) -> list[str]:
        return list(self.get(name).candidates)

    def names(self) -> list[str]:
        return list(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def prepare(self, name: str, value: Any) -> str:
        """Validate then normalize ``value`` for field ``name``."""
        field = self.get(name)
        if field.validator is not None and not field.validator(value):
            describe = getattr(field.validator, "describe", None)
            reason = describe() if callable(describe) else "Rejected by validator."
            raise ValidationFailure(name, value, reason)
        if field.normalizer is not None:
            return field.normalizer(value)
        return str(value)


class DomainHealing(AutoHealing):
    """
    AutoHealing addressed by semantic field name instead of raw candidates.

    Values are checked against the registry before anything touches the
    page, so a rejected value never counts as a resolution attempt.
    """

    default_fields: Sequence[SemanticField] = ()

    def __init__(self, *args: Any, registry: FieldRegistry | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.registry = registry or FieldRegistry(self.default_fields)

    async def find_field(self, name: str) -> ResolutionOutcome:
        return await self.find_element(self.registry.candidates(name))

    async def click_field(self, name: str, **options: Any) -> str:
        return await self.click(self.registry.candidates(name), **options)

    async def fill_field(self, name: str, value: Any, **options: Any) -> str:
        prepared = self.registry.prepare(name, value)
        return await self.fill(self.registry.candidates(name), prepared, **options)

    async def expect_field_text(self, name: str, expected: str) -> str:
        return await self.expect_text(self.registry.candidates(name), expected)
