"""Minimal .helmignore support for directory charts."""

from fnmatch import fnmatch
from pathlib import PurePosixPath
from typing import List, Tuple


# Always applied, after the chart's own rules
DEFAULT_PATTERNS = ("templates/.?*",)


class IgnoreRules:
    """Glob rules read from a .helmignore file.

    Supports `#` comments, `!` negation and a trailing `/` to match
    directories only. The last matching rule decides.
    """

    def __init__(self, rules: List[Tuple[str, bool, bool]]):
        self.rules = rules  # (pattern, negate, dir_only)

    @classmethod
    def parse(cls, text: str) -> "IgnoreRules":
        rules = []
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            negate = line.startswith("!")
            if negate:
                line = line[1:]
            dir_only = line.endswith("/")
            pattern = line.rstrip("/").lstrip("/")
            if pattern:
                rules.append((pattern, negate, dir_only))
        return cls(rules)

    @classmethod
    def empty(cls) -> "IgnoreRules":
        return cls([])

    def with_defaults(self) -> "IgnoreRules":
        """Copy of these rules followed by the built-in ones"""
        return IgnoreRules(self.rules + [(pattern, False, False) for pattern in DEFAULT_PATTERNS])

    def ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        """Whether `rel_path` (POSIX, relative to the chart root) is excluded."""
        path = PurePosixPath(rel_path)
        result = False
        for pattern, negate, dir_only in self.rules:
            if dir_only and not is_dir:
                continue
            target = rel_path if "/" in pattern else path.name
            if fnmatch(target, pattern):
                result = not negate
        return result
