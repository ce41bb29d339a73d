# Conversation history reconciliation
#
#   persisted log (append-only, read here)
#        |
#        +--> filter_paired_history   drop never-answered function calls
#        |
#        +--> RunGrouper              run_id -> ordered messages
#        |        |
#        |        v
#        +--> HistoryReconciler  ---> model-ready messages (+ media url resolution)
#        |
#        +--> locate_resume_info      backward scan to the last question

from .media import MediaURIResolver, ResolutionError, resolve_message_uris
from .pairing import filter_paired_history
from .reconciler import HistoryReconciler
from .resume import locate_resume_info
from .rounds import ConversationHistory, HistoryConfig
from .history_manager import HistoryManager

__all__ = [
    "MediaURIResolver", "ResolutionError", "resolve_message_uris",
    "filter_paired_history", "HistoryReconciler", "locate_resume_info",
    "ConversationHistory", "HistoryConfig", "HistoryManager",
]
