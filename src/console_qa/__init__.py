"""
Console QA - end-to-end checks for the Shunyalabs console.

A browser suite plus the reporting pipeline around it:
1. Run the console scenarios under pytest (page objects on Playwright)
2. Record one row per test in the test-case spreadsheet (Run Recorder)
3. Reduce the run report into dashboard data and CSVs (Dashboard Aggregator)
4. Mail an HTML summary of the run (Email Notifier)
5. Commit the dashboard data and trigger hosted runs (publish glue)

Quick Start:
    >>> from console_qa import ConsoleQAConfig, ReportPipeline
    >>>
    >>> pipeline = ReportPipeline(ConsoleQAConfig.from_env())
    >>> result = await pipeline.run(publish=False)

CLI Usage:
    $ python -m console_qa pipeline --timeout 1800

Modules:
    - browser: Browser launcher and sign-in bootstrap
    - pages: Page objects for every console screen
    - reporting: Recorder, extractor, aggregator, notifier, publisher
    - models: Outcome, snapshot and sink models
    - web: Local dashboard
"""
from .config import ConsoleQAConfig
from .main import run_cli
from .pipeline import ReportPipeline

__version__ = "0.1.0"
__author__ = "Console QA Team"

__all__ = [
    "ConsoleQAConfig",
    "ReportPipeline",
    "run_cli",
    "__version__",
]
