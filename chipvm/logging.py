"""Console logging utilities for the emulator driving loop.

The core engine never logs; everything here is used by :mod:`chipvm.machine`
and the command line entry point. Includes a tqdm progress bar for headless
runs.
"""

import time
import sys
from typing import Any, Dict, Optional, TextIO

from tqdm import tqdm

from chipvm.disassemble import disassemble


class ConsoleLogger:
    """Levelled console logger with optional colors and elapsed-time prefix."""

    def __init__(
        self,
        name: str = "chipvm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
        stream: Optional[TextIO] = None,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.stream = stream if stream is not None else sys.stdout
        self.use_colors = (
            use_colors and hasattr(self.stream, "isatty") and self.stream.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }

    def _should_log(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self._should_log(level):
            formatted = self._format_message(level, message)
            print(formatted, file=self.stream, flush=True)

    def debug(self, message: str):
        self.log("DEBUG", message)

    def info(self, message: str):
        self.log("INFO", message)

    def warning(self, message: str):
        self.log("WARNING", message)

    def error(self, message: str):
        self.log("ERROR", message)

    def critical(self, message: str):
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Logger with helpers for emulator lifecycle events."""

    def __init__(self, name: str = "chipvm", **kwargs):
        super().__init__(name, **kwargs)
        self.last_stats_time = time.time()
        self.last_stats_count = 0

    def log_run_start(self, config: Dict[str, Any]):
        """Log the effective configuration."""
        self.info("=" * 60)
        self.info("Starting emulator with configuration:")
        for key, value in config.items():
            if isinstance(value, dict):
                self.info(f"  {key}:")
                for sub_key, sub_value in value.items():
                    self.info(f"    {sub_key}: {sub_value}")
            else:
                self.info(f"  {key}: {value}")
        self.info("=" * 60)

    def log_rom_loaded(self, filename: str, size: int):
        self.info(f"Loaded ROM {filename} ({size} bytes)")

    def log_trace(self, pc: int, instruction: int):
        """Log one executed instruction, disassembled."""
        if self._should_log("DEBUG"):
            self.debug(f"0x{pc:03X}: {instruction:04X}  {disassemble(instruction)}")

    def log_fault(self, error: Exception, pc: int):
        self.error(f"Halted at PC=0x{pc:03X}: {error}")

    def log_stats(self, instruction_count: int, frame_count: int, interval: float = 5.0):
        """Log instruction throughput at most once per interval seconds."""
        now = time.time()
        elapsed = now - self.last_stats_time
        if elapsed < interval:
            return
        ips = (instruction_count - self.last_stats_count) / elapsed
        self.info(f"Frame {frame_count}: {instruction_count} instructions ({ips:.0f} Hz)")
        self.last_stats_time = now
        self.last_stats_count = instruction_count


def build_progress_bar(n: int, desc: Optional[str] = None, **kwargs) -> tqdm:
    """Progress bar over ``n`` frames for headless runs."""
    if desc is None:
        desc = f"Emulating ({n:,} frames)"
    return tqdm(total=n, desc=desc, unit="frame", **kwargs)
