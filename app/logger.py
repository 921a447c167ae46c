import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Final, List, Tuple, Union

from rich.console import Console
from rich.logging import RichHandler

from __version__ import __version_string__

console: Final[Console] = Console()


log_root: Final[Path] = Path("log").resolve()


class Chip8FileHandler(logging.Handler):
    """
    Append records to a session log file, holding back lines that failed to write.

    The first line written is a header naming the interpreter version and
    the session start time.
    """

    def __init__(self, file_name: Union[str, Path]):
        super().__init__()
        self._file_name = Path(file_name)
        self._log_hold: List[Tuple[logging.LogRecord, Exception]] = []
        self._started: str = datetime.now().strftime(time_format)
        self._header_written: bool = False

    @property
    def header(self) -> str:
        return f"# CHIP-8 interpreter {__version_string__}, session started {self._started}"

    def _write_log_entry(self, log_entry: str) -> None:
        self._file_name.parent.mkdir(parents=True, exist_ok=True)
        with open(self._file_name, "a", encoding="utf-8") as f:
            if not self._header_written:
                f.write(self.header + "\n")
                self._header_written = True
            f.write(log_entry + "\n")

    def emit(self, record: logging.LogRecord) -> None:
        log_entry = self.format(record)

        self.acquire()
        try:
            if self._log_hold:
                still_failed = []
                for old_record, _ in self._log_hold:
                    try:
                        self._write_log_entry(self.format(old_record))
                    except OSError as e:
                        still_failed.append((old_record, e))
                self._log_hold = still_failed

            try:
                self._write_log_entry(log_entry)
            except OSError as e:
                self._log_hold.append((record, e))

        finally:
            self.release()


debug_mode: Final[bool] = "--debug" in sys.argv

level: Final[int] = logging.DEBUG if debug_mode else logging.INFO
time_format: Final[str] = "%Y-%m-%d %H:%M:%S"


def get_time() -> str:
    return datetime.now().strftime("%Y-%m-%d_%H-%M-%S")


logging.basicConfig(
    level=level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt=time_format,
    handlers=[
        RichHandler(
            rich_tracebacks=True,
            show_path=True,
            enable_link_path=True,
            tracebacks_show_locals=debug_mode,
            show_level=False,
            console=console,
        ),
        Chip8FileHandler(log_root / f"chip8_{get_time()}.log"),
    ],
)
log: Final[logging.Logger] = logging.getLogger("CHIP8")
