import threading
from collections import OrderedDict
from typing import Optional

from .recommender import SelectionSession

DEFAULT_MAX_SESSIONS = 1000


class SelectionRegistry:
    """
    Selection sessions keyed by client id, least recently used evicted first.

    Callers hold ``lock`` across read-modify-write.
    """

    def __init__(self, max_sessions=DEFAULT_MAX_SESSIONS):
        self.lock = threading.Lock()
        self.max_sessions = max_sessions
        self._sessions = OrderedDict()

    def get(self, client_id) -> Optional[SelectionSession]:
        selection = self._sessions.get(client_id)
        if selection is not None:
            self._sessions.move_to_end(client_id)
        return selection

    def put(self, client_id, selection: SelectionSession):
        self._sessions[client_id] = selection
        self._sessions.move_to_end(client_id)
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)

    def __contains__(self, client_id):
        return client_id in self._sessions

    def __len__(self):
        return len(self._sessions)
