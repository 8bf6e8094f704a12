"""Ward scheduler: shift roster generation and scoring for nursing staff.

Modules:
- config: load and validate configuration (JSON or YAML)
- domain: flat records, SQLAlchemy models and repositories
- engine: day-by-day allocation, swap optimizer and orchestrator
- services: roster view, absence index, rule checks, conflicts and scoring
- io: CSV import/export helpers
- cli: command-line interface entrypoints
"""

from ward_scheduler.engine.orchestrator import ScheduleResult, generate_schedule
from ward_scheduler.services.conflicts import check_conflicts
from ward_scheduler.services.scoring import analyze_quality, compute_quality

__version__ = "0.1.0"

__all__ = [
    "generate_schedule",
    "ScheduleResult",
    "compute_quality",
    "analyze_quality",
    "check_conflicts",
]
