import logging
from typing import Iterator, Optional, Callable
from contextlib import contextmanager

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn
from rich.traceback import install as install_rich_traceback
from rich.theme import Theme

# Custom theme
batchcensor_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

class ConsoleManager:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConsoleManager, cls).__new__(cls)
            cls._instance.initialized = False
        return cls._instance

    def __init__(self):
        if self.initialized:
            return

        # Diagnostics go to stderr so stdout stays clean for --init, --stats and manifests.
        self.console = Console(theme=batchcensor_theme, stderr=True)
        self.output_mode = "standard"
        self.initialized = True

        install_rich_traceback(console=self.console, show_locals=False)

    def configure(self, output_mode: str = "standard", debug: bool = False):
        """
        Configure the console manager.
        output_mode: 'standard', 'verbose', 'silent'
        """
        self.output_mode = output_mode.lower()
        if debug:
            self.output_mode = "verbose"

        logger = logging.getLogger("BatchCensor")
        if self.output_mode == "silent":
            logger.setLevel(logging.CRITICAL)
        elif self.output_mode == "verbose":
            logger.setLevel(logging.DEBUG)
        else:
            logger.setLevel(logging.INFO)

    def print(self, *args, **kwargs):
        if self.output_mode != "silent":
            self.console.print(*args, **kwargs)

    def success(self, message: str):
        if self.output_mode != "silent":
            self.console.print(f"✅ {message}", style="success")

    def warning(self, message: str):
        if self.output_mode != "silent":
            self.console.print(f"⚠️ {message}", style="warning")

    def error_panel(self, message: str, title: str = "Error"):
        if self.output_mode != "silent":
            self.console.print(Panel(message, title=title, border_style="red", expand=False))

    @contextmanager
    def status(self, message: str) -> Iterator[None]:
        """
        Show a spinner status in standard mode.
        In verbose mode, just log start/end.
        In silent mode, do nothing.
        """
        if self.output_mode == "silent":
            yield
            return

        if self.output_mode == "verbose":
            self.console.log(f"Started: {message}")
            try:
                yield
            finally:
                self.console.log(f"Finished: {message}")
            return

        with self.console.status(f"[bold cyan]{message}", spinner="dots"):
            yield

    @contextmanager
    def progress(self, total: int, description: str = "Processing") -> Iterator[Callable[[], None]]:
        """
        Show a progress bar over `total` units of work.
        Yields a callable that advances the bar by one; safe to call from worker threads.
        """
        if self.output_mode == "silent":
            yield lambda: None
            return

        columns = (
            TextColumn("[bold cyan]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        with Progress(*columns, console=self.console, transient=self.output_mode != "verbose") as bar:
            task_id = bar.add_task(description, total=total)
            yield lambda: bar.advance(task_id)

# Global instance
console = ConsoleManager()
