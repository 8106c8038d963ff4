"""
Session Registry - Which connections are joined to which pairing code.

Sessions are EPHEMERAL:
- In-memory only, lost on restart
- A code exists while at least one connection is joined to it
- Emptying a code's connection set removes the code
"""

from __future__ import annotations


class SessionRegistry:
    """
    Maps pairing code -> set of connection ids.

    All operations are total and synchronous; callers on the event loop
    never interleave between a read and a write of the map.
    """

    def __init__(self):
        self._sessions: dict[str, set[str]] = {}

    def join(self, code: str, connection_id: str):
        """Add a connection to a code, creating the code if needed."""
        self._sessions.setdefault(code, set()).add(connection_id)

    def leave(self, connection_id: str) -> list[str]:
        """
        Remove a connection from every code it belongs to.

        Codes left without members are deleted.

        Returns:
            Codes the connection was removed from (usually zero or one)
        """
        left = []
        for code in list(self._sessions):
            members = self._sessions[code]
            if connection_id in members:
                members.discard(connection_id)
                left.append(code)
                if not members:
                    del self._sessions[code]
        return left

    def members(self, code: str) -> set[str]:
        """Connection ids joined to a code (a copy; empty if unknown)."""
        return set(self._sessions.get(code, ()))

    def codes(self) -> list[str]:
        """All codes with at least one member."""
        return list(self._sessions)

    def __contains__(self, code: object) -> bool:
        return code in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
