"""Console logging utilities for the CHIP-8 interpreter.

Plain print-based logger with levels, timestamps and ANSI colors. Compiled
code never logs; the interpreter facade reports loads, faults and ticks.
"""

import time
import sys

from chip8core.errors import Chip8Error


class ConsoleLogger:
    """Flexible console logger with level filtering and colors."""

    def __init__(
        self,
        name: str = "chip8core",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
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
            print(formatted, flush=True)

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
    """Logger for interpreter lifecycle events."""

    def __init__(self, name: str = "chip8core", **kwargs):
        super().__init__(name, **kwargs)

    def log_load(self, size: int, capacity: int):
        """Log a program image being loaded."""
        self.info(f"Loaded {size} byte program image ({capacity - size} bytes free)")

    def log_fault(self, error: Chip8Error):
        """Log an error that stopped the interpreter or rejected an image."""
        self.error(str(error))

    def log_tick(self, tick: int, state):
        """Log a one-line register summary, at DEBUG level."""
        if not self._should_log("DEBUG"):
            return
        registers = " ".join(f"{int(v):02X}" for v in state.V)
        self.debug(
            f"tick {tick}: pc=0x{int(state.pc):03X} I=0x{int(state.I):03X} "
            f"DT={int(state.delay_timer)} ST={int(state.sound_timer)} V=[{registers}]"
        )
