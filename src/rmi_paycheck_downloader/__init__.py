from .models import Credentials, RecordEntry
from .orchestrator import PaycheckRun, RunState

__all__ = ["Credentials", "PaycheckRun", "RecordEntry", "RunState"]
