"""Models for representing diff results."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ChangeType(str, Enum):
    """Classification of a single comparison unit."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class DiffChange(BaseModel):
    """One unit of a comparison result (a line, a run of characters, a row or a JSON path)."""

    model_config = ConfigDict(frozen=False)

    type: ChangeType
    left_line_number: int | None = None  # 1-indexed
    right_line_number: int | None = None  # 1-indexed
    left_content: str | None = None
    right_content: str | None = None

    @model_validator(mode="after")
    def _check_sides(self) -> "DiffChange":
        if self.type == ChangeType.ADDED and (
            self.left_line_number is not None or self.left_content is not None
        ):
            raise ValueError("added change cannot carry left-side fields")
        if self.type == ChangeType.DELETED and (
            self.right_line_number is not None or self.right_content is not None
        ):
            raise ValueError("deleted change cannot carry right-side fields")
        if self.type in (ChangeType.MODIFIED, ChangeType.UNCHANGED) and (
            self.left_content is None or self.right_content is None
        ):
            raise ValueError(f"{self.type.value} change needs content on both sides")
        return self


class DiffStats(BaseModel):
    """Tally of changes by type."""

    model_config = ConfigDict(frozen=False)

    additions: int = 0
    deletions: int = 0
    modifications: int = 0
    unchanged: int = 0

    @classmethod
    def from_changes(cls, changes: list[DiffChange]) -> "DiffStats":
        stats = cls()
        for change in changes:
            stats.record(change.type)
        return stats

    def record(self, change_type: ChangeType) -> None:
        if change_type == ChangeType.ADDED:
            self.additions += 1
        elif change_type == ChangeType.DELETED:
            self.deletions += 1
        elif change_type == ChangeType.MODIFIED:
            self.modifications += 1
        else:
            self.unchanged += 1

    @property
    def has_differences(self) -> bool:
        return bool(self.additions or self.deletions or self.modifications)


class DiffResult(BaseModel):
    """Ordered changes plus their tally."""

    model_config = ConfigDict(frozen=False)

    changes: list[DiffChange] = Field(default_factory=list)
    stats: DiffStats = Field(default_factory=DiffStats)

    @classmethod
    def from_changes(cls, changes: list[DiffChange]) -> "DiffResult":
        return cls(changes=changes, stats=DiffStats.from_changes(changes))
