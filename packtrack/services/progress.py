from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

In non-TTY environments (CI, pipes) no bar is created, so the output stays
free of ANSI control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Progress bar over import sources, advanced as each source settles."""

    def __init__(self, total: int, *, description: str = "Importing", enabled: bool = True) -> None:
        self.total = total
        self.description = description
        self.completed = 0
        self.succeeded = 0
        self.failed = 0

        self.enabled = enabled and is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, source: str, success: bool = True) -> None:
        """Record one settled source."""
        self.completed += 1
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.set_postfix(file=source, ok=self.succeeded, failed=self.failed)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
