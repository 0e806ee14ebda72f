# trade_import/utils/sorting_utils.py
import logging
from datetime import datetime
from typing import List, Sequence, Tuple

from trade_import.domain.executions import Execution

logger = logging.getLogger(__name__)

def get_execution_sort_key(indexed_execution: Tuple[int, Execution]) -> Tuple[datetime, int]:
    """
    Deterministic sort key for executions.
    Primary key: timestamp.
    Secondary key: position in the input stream, so executions sharing a
    timestamp keep the order the export listed them in.
    """
    position, execution = indexed_execution
    return (execution.timestamp, position)

def sort_executions_chronologically(executions: Sequence[Execution]) -> List[Execution]:
    """Returns a new list ordered by timestamp ascending; ties keep input order."""
    ordered = sorted(enumerate(executions), key=get_execution_sort_key)
    return [execution for _, execution in ordered]
