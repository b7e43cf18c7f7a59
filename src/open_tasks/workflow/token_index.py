"""Token index: human-chosen token to the id of its latest reference."""

import logging
from typing import Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


class TokenIndex:
    """Last-write-wins mapping from token to reference id.

    Retargeting a token never deletes the older reference; it stays
    retrievable by its own id. Each backend instance owns exactly one index.
    """

    def __init__(self) -> None:
        self._ids: Dict[str, str] = {}

    def assign(self, token: str, ref_id: str) -> Optional[str]:
        """Point ``token`` at ``ref_id`` and return the id it pointed at before."""
        previous = self._ids.get(token)
        self._ids[token] = ref_id
        if previous is not None and previous != ref_id:
            logger.debug(
                "token retargeted",
                extra={"token": token, "ref_id": ref_id, "previous_id": previous},
            )
        return previous

    def resolve(self, token: str) -> Optional[str]:
        return self._ids.get(token)

    def tokens(self) -> List[str]:
        return list(self._ids)

    def clear(self) -> None:
        self._ids.clear()

    def __contains__(self, token: object) -> bool:
        return token in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)
