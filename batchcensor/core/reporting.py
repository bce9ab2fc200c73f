import sys
import logging
from typing import Dict, List, Optional, TextIO

from .reconcile import ReconcileState

logger = logging.getLogger("BatchCensor.Reporting")

class CensorReporter:
    def __init__(self, state: ReconcileState):
        self.state = state

    def generate_summary(self) -> Dict[str, int]:
        """Count files per outcome and tasks overall."""
        return {
            "clean": len(self.state.clean),
            "processed": len(self.state.processed),
            "silenced": len(self.state.silenced),
            "unaccounted": len(self.state.unaccounted),
            "tasks": len(self.state.tasks),
            "modified_dirs": len(self.state.modified),
        }

    def listing(self) -> List[str]:
        """One line per file that will be silenced, naming the config responsible."""
        lines = []
        for path in self.state.unaccounted:
            lines.append(f"{self.state.origins[path].config_path}: missing config for: {path}")
        for path in self.state.silenced:
            lines.append(f"{self.state.origins[path].config_path}: silenced config for: {path}")
        return lines

    def report_silenced(self, list_files: bool = False):
        """Warn about files that will be silenced; with list_files, name each of them."""
        unaccounted = self.state.unaccounted
        silenced = self.state.silenced

        if list_files:
            for line in self.listing():
                logger.warning(line)
            return

        if unaccounted:
            logger.warning(f"Missing censor configuration for {len(unaccounted)} file(s) (--list to see them)")
        if silenced:
            logger.warning(f"Silenced censor configuration for {len(silenced)} file(s) (--list to see them)")

    def print_stats(self, out: Optional[TextIO] = None):
        """Print how often each censored word occurs."""
        out = out or sys.stdout
        out.write("# Statistics (--stats)\n")
        for word, count in sorted(self.state.word_counts.items()):
            out.write(f"{word} - {count}\n")

    def print_summary(self):
        summary = self.generate_summary()
        logger.info(
            f"{summary['processed']} processed, {summary['clean']} clean, "
            f"{summary['silenced']} silenced, {summary['unaccounted']} unaccounted "
            f"({summary['tasks']} task(s), {summary['modified_dirs']} modified dir(s))"
        )
