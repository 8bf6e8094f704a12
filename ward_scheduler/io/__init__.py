"""I/O utilities for CSV import/export."""

from .export_csv import (
    export_shifts_csv,
    export_staff_csv,
    write_assignments_csv,
    write_roster_grid_csv,
)
from .import_csv import (
    import_staff_csv,
    import_vacations_csv,
    read_absences_csv,
    read_assignments_csv,
    read_staff_csv,
)

__all__ = [
    "import_staff_csv",
    "import_vacations_csv",
    "read_staff_csv",
    "read_absences_csv",
    "read_assignments_csv",
    "export_shifts_csv",
    "export_staff_csv",
    "write_assignments_csv",
    "write_roster_grid_csv",
]
