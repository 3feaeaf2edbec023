# =============================================================================
# Outcome Models (Run Recorder / Report Extractor)
# Used for: One attempt seen live, one final outcome per logical test
# =============================================================================
from .outcome import (
    Attachment,  # Raw attachment reported by the engine
    AttemptRecord,  # One finished attempt, fed live to the recorder
    OutcomeAttachment,  # Attachment as stored on the dashboard
    TestOutcome,  # Final outcome of one logical test
    TestStatus,  # Enum: passed, failed, skipped, timedOut
)

# =============================================================================
# Snapshot Models (Dashboard Aggregator / Notifier)
# Used for: latest.json and the bounded run history
# =============================================================================
from .run_snapshot import (
    ModuleSummary,  # Per-module counters
    RunHistoryEntry,  # Summary-only past run
    RunSnapshot,  # Latest run with full test detail
    RunSummary,  # Grand totals
)

# =============================================================================
# Sink Models (Spreadsheet / Email / Dispatch)
# =============================================================================
from .sheet_row import (
    DeliveryResult,  # Result of a sink push
    SheetRow,  # Spreadsheet row
    SheetStatus,  # Enum: PASS, FAIL, SKIP
)

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    "Attachment",
    "AttemptRecord",
    "OutcomeAttachment",
    "TestOutcome",
    "TestStatus",

    "ModuleSummary",
    "RunHistoryEntry",
    "RunSnapshot",
    "RunSummary",

    "DeliveryResult",
    "SheetRow",
    "SheetStatus",
]
