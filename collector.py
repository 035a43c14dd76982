"""PowerShell Security log queries."""

import logging
import subprocess
from datetime import datetime
from typing import List, Optional, Tuple

from winevt.detect import parse_ps_version, select_variant
from winevt.layouts import (
    CMD_EVENT_LOG,
    CMD_EXIT,
    CMD_VARS,
    CMD_VERSION,
    CMD_WIN_EVENT,
    TIME_LAYOUT,
)
from winevt.types import Variant


logger = logging.getLogger("winevt.collector")


class CollectorError(RuntimeError):
    pass


def format_time(ts: datetime) -> str:
    return ts.strftime(TIME_LAYOUT)


class PowerShellCollector:
    def __init__(
        self,
        encoding: str = "gbk",
        timeout: int = 120,
        executable: str = "powershell",
    ):
        self.encoding = encoding
        self.timeout = timeout
        self.executable = executable

    # ---------- Internal helpers ----------

    def _run(self, args: List[str], stdin: Optional[str] = None) -> str:
        try:
            result = subprocess.run(
                [self.executable, *args],
                input=stdin.encode(self.encoding) if stdin is not None else None,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise CollectorError(f"{self.executable} failed to run: {e}") from e

        if result.returncode != 0:
            raise CollectorError(
                f"{self.executable} exited with {result.returncode}: "
                f"{self._decode(result.stderr).strip()}"
            )

        return self._decode(result.stdout)

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise CollectorError(f"cannot decode output as {self.encoding}: {e}") from e

    # ---------- Public API ----------

    def version(self) -> Optional[Tuple[int, int]]:
        return parse_ps_version(self._run([CMD_VERSION]))

    def detect_variant(self) -> Variant:
        ver = self.version()
        variant = select_variant(ver)
        logger.info("PowerShell version %s -> %s", ver, variant.name)
        return variant

    def query(self, variant: Variant, begin: datetime, end: datetime) -> str:
        """
        Run the Security log query for [begin, end) and return its text.

        The modern query goes through stdin, so the echoed command line
        ends up in the output; the layout banner accounts for it.
        """
        b, e = format_time(begin), format_time(end)

        if variant == Variant.WIN_EVENT:
            script = CMD_VARS.format(begin=b, end=e) + CMD_WIN_EVENT + CMD_EXIT
            return self._run([], stdin=script)

        return self._run([CMD_EVENT_LOG.format(begin=b, end=e)])
