"""Progress summary.

Placeholder figures until assessments are stored; nothing here reads user data.
"""

from datetime import datetime, timezone

PROGRESS_HISTORY = (
    {"date": "2024-01-01", "score": 65},
    {"date": "2024-01-15", "score": 70},
    {"date": "2024-02-01", "score": 75},
)


def get_progress() -> dict:
    return {
        "mentalHealthScore": 75,
        "assessmentsCompleted": 3,
        "lastAssessmentDate": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
        "progressHistory": [dict(entry) for entry in PROGRESS_HISTORY],
    }
