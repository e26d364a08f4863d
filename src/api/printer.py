import asyncio
import subprocess
import sys
from pathlib import Path
from typing import List, Sequence

from core.errors import PrintFailed
from core.models import QueueLineItem
from utils.logger import get_logger
from utils.pure import label_lines

_logger = get_logger(__name__)


def opener_command(path: str) -> List[str]:
    """Command that opens ``path`` with whatever the OS associates it with."""
    if sys.platform == "win32":
        return ["cmd", "/C", "start", "", path]
    if sys.platform == "darwin":
        return ["open", path]
    return ["xdg-open", path]


class LabelPrinter:
    """
    Hands labels to the label designer: the queue is written to a data file
    that the template reads, then the template itself is opened.
    """

    def __init__(
        self, data_file_path: str, template_file_path: str, open_template: bool = True
    ):
        self.data_file_path = Path(data_file_path)
        self.template_file_path = template_file_path
        self.open_template = open_template

    def _write_data_file(self, items: Sequence[QueueLineItem]) -> int:
        lines = label_lines(items)
        self.data_file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.data_file_path, "w", encoding="utf-8", newline="") as f:
            for line in lines:
                f.write(line + "\n")
        return len(lines)

    def _launch_template(self) -> None:
        subprocess.Popen(opener_command(self.template_file_path))

    async def print_labels(self, items: Sequence[QueueLineItem]) -> str:
        try:
            label_cnt = await asyncio.to_thread(self._write_data_file, items)
        except OSError as e:
            raise PrintFailed(f"Could not write label data: {e}") from e
        _logger.info(f"Wrote {label_cnt} labels to {self.data_file_path}")

        if self.open_template and self.template_file_path:
            try:
                await asyncio.to_thread(self._launch_template)
            except OSError as e:
                raise PrintFailed(f"Failed to open template: {e}") from e
            _logger.info(f"Opened label template {self.template_file_path}")

        return "Success"
