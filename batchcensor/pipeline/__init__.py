from .base import BaseTask, RunReport, TaskRunner
from .generator import Generator, SilenceGenerator, ToneGenerator, create_generator
from .copy import CopyTask
from .process import ProcessTask
from .silence import SilenceTask
