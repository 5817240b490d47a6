## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import os
import glob
import shutil
from pathlib import Path


SOURCE_SUFFIX = '.ex'
ARTIFACT_SUFFIX = '.emc'


def expand(path: str) -> str:
    """Expand `~` and environment variables, then make the path absolute."""
    return os.path.abspath(os.path.expanduser(os.path.expandvars(path)))


def wildcard(pattern: str) -> list[str]:
    """Sorted matches for a glob pattern, with `**` descending into sub-directories."""
    return sorted(glob.glob(pattern, recursive=True))


def is_dir(path: str) -> bool:
    return os.path.isdir(path)


def is_regular(path: str) -> bool:
    return os.path.isfile(path)


def find_executable(name: str) -> str | None:
    return shutil.which(name)


def mkdir_p(path: str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def source_pattern(directory: str) -> str:
    return f"{directory.rstrip('/')}/**/*{SOURCE_SUFFIX}"


class LoadPath:
    """Ordered directories searched for compiled modules, replacing a process-wide code path."""

    def __init__(self, entries=()):
        self.entries: list[str] = list(entries)

    @classmethod
    def from_env(cls) -> "LoadPath":
        parts = [p for p in os.environ.get("EMBER_PATH", "").split(os.pathsep) if p]
        return cls(expand(p) for p in parts)

    def prepend(self, path: str) -> None:
        if path in self.entries: self.entries.remove(path)
        self.entries.insert(0, path)

    def append(self, path: str) -> None:
        if path in self.entries: self.entries.remove(path)
        self.entries.append(path)

    def candidates(self, module: str):
        for root in self.entries:
            yield Path(root) / f"{module}{ARTIFACT_SUFFIX}"

    def __iter__(self):
        return iter(self.entries)

    def __len__(self):
        return len(self.entries)

    def __repr__(self):
        return f"LoadPath({self.entries!r})"
