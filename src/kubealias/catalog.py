"""Static kubectl command catalog.

Each known subcommand carries a priority flag and a set of named modifier
groups. A modifier group maps a short suffix token to the literal kubectl
flag it stands for, e.g. the "output" group maps "j" to "-o json".

The catalog is built once at startup and passed explicitly to the allocator
and emitter. Instances are immutable; extending the catalog from config
returns a new catalog.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

logger = logging.getLogger(__name__)

OUTPUT_MODIFIERS: Mapping[str, str] = MappingProxyType(
    {
        "j": "-o json",
        "y": "-o yaml",
        "w": "-o wide",
    }
)

INPUT_MODIFIERS: Mapping[str, str] = MappingProxyType(
    {
        "f": "-f",
        "": "",  # default input (stdin)
    }
)

SCOPE_MODIFIERS: Mapping[str, str] = MappingProxyType(
    {
        "n": "--all-namespaces",
    }
)

MODIFIER_GROUPS: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "output": OUTPUT_MODIFIERS,
        "input": INPUT_MODIFIERS,
        "scope": SCOPE_MODIFIERS,
    }
)

# Commands that operate on a resource kind and get per-resource aliases
RESOURCE_SCOPED_COMMANDS: frozenset[str] = frozenset(
    {"get", "edit", "create", "delete", "describe"}
)

# The retrieve command additionally gets per-resource output functions
RETRIEVE_COMMAND = "get"


class CatalogError(Exception):
    """Raised when a catalog entry is invalid."""

    pass


@dataclass(frozen=True)
class CommandSpec:
    """A single catalog entry.

    Attributes:
        name: kubectl subcommand (e.g. "get")
        priority: Whether the command competes for a one-character alias
        modifiers: Modifier group name -> {suffix: flag}
    """

    name: str
    priority: bool = False
    modifiers: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise CatalogError("Command name cannot be empty")
        frozen = MappingProxyType(
            {group: MappingProxyType(dict(mods)) for group, mods in self.modifiers.items()}
        )
        object.__setattr__(self, "modifiers", frozen)

    @classmethod
    def with_groups(
        cls, name: str, priority: bool = False, groups: Iterable[str] = ()
    ) -> "CommandSpec":
        """Build a spec from built-in modifier group names.

        Raises:
            CatalogError: If a group name is not a built-in modifier group
        """
        modifiers = {}
        for group in groups:
            if group not in MODIFIER_GROUPS:
                raise CatalogError(
                    f"Unknown modifier group '{group}' for command '{name}'. "
                    f"Valid groups: {', '.join(sorted(MODIFIER_GROUPS))}"
                )
            modifiers[group] = MODIFIER_GROUPS[group]
        return cls(name=name, priority=priority, modifiers=modifiers)


class CommandCatalog(Mapping[str, CommandSpec]):
    """Read-only mapping of command name to CommandSpec."""

    def __init__(self, specs: Iterable[CommandSpec]):
        self._specs: dict[str, CommandSpec] = {}
        for spec in specs:
            self._specs[spec.name] = spec

    def __getitem__(self, name: str) -> CommandSpec:
        return self._specs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"CommandCatalog({sorted(self._specs)!r})"

    def priority_commands(self) -> list[str]:
        """Return priority command names in lexicographic order."""
        return sorted(name for name, spec in self._specs.items() if spec.priority)

    def merged(self, overrides: Iterable[CommandSpec]) -> "CommandCatalog":
        """Return a new catalog with entries added or replaced by overrides."""
        specs = dict(self._specs)
        for spec in overrides:
            if spec.name in specs:
                logger.debug(f"Overriding catalog entry: {spec.name}")
            specs[spec.name] = spec
        return CommandCatalog(specs.values())


DEFAULT_CATALOG = CommandCatalog(
    [
        CommandSpec.with_groups("apply", priority=True, groups=["input"]),
        CommandSpec.with_groups("create", priority=True),
        CommandSpec.with_groups("describe", priority=True, groups=["scope"]),
        CommandSpec.with_groups("edit", priority=True),
        CommandSpec.with_groups("get", priority=True, groups=["output", "scope"]),
        CommandSpec.with_groups("logs", priority=True),
        CommandSpec.with_groups("top", priority=True),
        CommandSpec.with_groups("auth", groups=["scope"]),
        CommandSpec.with_groups("debug", groups=["scope"]),
        CommandSpec.with_groups("events", groups=["output"]),
        CommandSpec.with_groups("delete", groups=["input"]),
    ]
)


__all__ = [
    "DEFAULT_CATALOG",
    "INPUT_MODIFIERS",
    "MODIFIER_GROUPS",
    "OUTPUT_MODIFIERS",
    "RESOURCE_SCOPED_COMMANDS",
    "RETRIEVE_COMMAND",
    "SCOPE_MODIFIERS",
    "CatalogError",
    "CommandCatalog",
    "CommandSpec",
]
