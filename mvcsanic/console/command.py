"""
Base Command Class
Command base class for the mvcsanic CLI
"""
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING
import sys

if TYPE_CHECKING:
    from mvcsanic.application import Application


class Command(ABC):

    # Command name (e.g., "route:list")
    name: str = ""

    # Command description
    description: str = ""

    # Command signature (for help display)
    signature: Optional[str] = None

    def __init__(self, output=None):
        if not self.signature:
            self.signature = self.name
        self.output = output or sys.stdout
        self.app: Optional['Application'] = None  # Will be injected by the console

    @abstractmethod
    async def handle(self, *args, **kwargs):
        """
        Execute the command logic

        Returns:
            int: Exit code (0 for success, non-zero for error)
        """
        pass

    # Output helpers
    def info(self, message: str):
        """Print info message"""
        self.line(f"ℹ {message}")

    def success(self, message: str):
        """Print success message"""
        self.line(f"✅ {message}")

    def error(self, message: str):
        """Print error message"""
        self.line(f"❌ {message}")

    def warning(self, message: str):
        """Print warning message"""
        self.line(f"⚠ {message}")

    def line(self, message: str = ""):
        """Print plain line"""
        print(message, file=self.output)

    def table(self, headers: list, rows: list):
        """Print a simple table"""
        # Calculate column widths
        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                widths[i] = max(widths[i], len(str(cell)))

        # Print header
        header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        self.line(header_line)
        self.line("-" * len(header_line))

        # Print rows
        for row in rows:
            row_line = " | ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row))
            self.line(row_line)
