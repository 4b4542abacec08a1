"""Pull request attribute bundle evaluated by the rule engine."""

from dataclasses import dataclass, field

LabelSet = frozenset[str]


@dataclass(frozen=True)
class PullRequestAttributes:
    """Normalized view of a pull request event."""

    owner: str
    repo_name: str
    number: int
    title: str = ""
    branch_name: str = ""
    mergeable: bool = False
    diff_size: int = 0
    changed_files: frozenset[str] = field(default_factory=frozenset)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo_name}"

    def __str__(self) -> str:
        return f"{self.full_name}#{self.number}"
