from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence
import logging
import os

from ..core.console import console
from ..errors import TaskError
from .generator import Generator

logger = logging.getLogger("BatchCensor.Pipeline")

class BaseTask(ABC):
    """A single unit of work writing one destination file from one source file."""

    verb: str

    def __init__(self, src: Path, dest: Path):
        self.src = src
        self.dest = dest

    def run(self, generator: Generator) -> bool:
        """
        Execute the task.
        Returns False if the destination was already up to date and nothing was written.
        Raises TaskError tagged with the task description on any failure.
        """
        try:
            return self.execute(generator)
        except Exception as e:
            raise TaskError(str(self), e) from e

    @abstractmethod
    def execute(self, generator: Generator) -> bool:
        """
        Implement task logic here.
        The destination must be written completely or not at all.
        """
        pass

    def __str__(self) -> str:
        return f"{self.verb} {self.src} -> {self.dest}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.src)!r}, {str(self.dest)!r})"


@dataclass
class RunReport:
    written: int = 0
    skipped: int = 0
    failures: List[TaskError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class TaskRunner:
    """Runs independent tasks on a bounded thread pool and collects every outcome."""

    def __init__(self, generator: Generator, jobs: Optional[int] = None):
        self.generator = generator
        self.jobs = jobs or os.cpu_count() or 1

    def run(self, tasks: Sequence[BaseTask]) -> RunReport:
        report = RunReport()
        if not tasks:
            logger.info("Nothing to do.")
            return report

        logger.info(f"Running {len(tasks)} task(s) on {self.jobs} worker(s) with {self.generator.name} generator")

        with console.progress(len(tasks), "Censoring") as advance:
            with ThreadPoolExecutor(max_workers=self.jobs) as executor:
                futures = {executor.submit(task.run, self.generator): task for task in tasks}

                for future in as_completed(futures):
                    task = futures[future]
                    try:
                        written = future.result()
                    except TaskError as e:
                        logger.error(str(e))
                        report.failures.append(e)
                    else:
                        if written:
                            report.written += 1
                        else:
                            logger.debug(f"Up to date: {task}")
                            report.skipped += 1
                    advance()

        logger.info(f"Finished: {report.written} written, {report.skipped} up to date, {len(report.failures)} failed")
        return report
