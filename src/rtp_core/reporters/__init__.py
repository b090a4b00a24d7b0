from rtp_core.reporters.base import BaseReporter
from rtp_core.reporters.console import ConsoleReporter

__all__ = ["BaseReporter", "ConsoleReporter"]
