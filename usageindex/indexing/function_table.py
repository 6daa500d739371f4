from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from usageindex.errors import MalformedReport


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    param_count: int


@dataclass(frozen=True)
class UsageRecord:
    source_label: str
    line: int
    column: int

    @property
    def example_name(self) -> str:
        """Label without its group directory and extension: ``core/basic.c`` -> ``basic``."""
        parts = PurePosixPath(self.source_label).parts
        rest = PurePosixPath(*parts[1:]) if len(parts) > 1 else PurePosixPath(self.source_label)
        return str(rest.with_suffix("")) if rest.suffix else str(rest)


@dataclass
class FunctionTable:
    functions: list[FunctionDescriptor] = field(default_factory=list)
    usages_by_name: dict[str, list[UsageRecord]] = field(default_factory=dict)

    def add_function(self, func: FunctionDescriptor, line_number: int | None = None) -> None:
        if not func.name:
            raise MalformedReport("empty function name", line_number)
        if func.name in self.usages_by_name:
            raise MalformedReport(f"duplicate function name: {func.name}", line_number)
        self.functions.append(func)
        self.usages_by_name[func.name] = []

    def add_usage(self, name: str, usage: UsageRecord) -> None:
        self.usages_by_name[name].append(usage)

    def usages(self, name: str) -> list[UsageRecord]:
        return self.usages_by_name.get(name, [])

    def names(self) -> list[str]:
        return [f.name for f in self.functions]

    def entries(self) -> list[tuple[FunctionDescriptor, list[UsageRecord]]]:
        return [(f, self.usages_by_name[f.name]) for f in self.functions]

    def total_usages(self) -> int:
        return sum(len(u) for u in self.usages_by_name.values())

    def unused(self) -> list[str]:
        return [f.name for f in self.functions if not self.usages_by_name[f.name]]

    def __contains__(self, name: object) -> bool:
        return name in self.usages_by_name

    def __len__(self) -> int:
        return len(self.functions)
