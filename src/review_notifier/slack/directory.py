"""
Identity Directory

Maps GitHub usernames to Slack identities. Loaded once from a base64
encoded JSON array such as ``[{"username": "alice", "id": "U123"}]``
and read-only afterwards.
"""

import base64
import binascii
import json
import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from ..models.directory import DirectoryEntry, DirectoryEntryRecord


logger = logging.getLogger(__name__)


class DecodeError(Exception):
    """Identity payload could not be decoded"""
    BASE64 = "base64"
    JSON = "json"

    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        if stage not in (self.BASE64, self.JSON):
            raise ValueError(f"Invalid decode stage: {stage}")
        if stage == self.BASE64:
            message = f"could not decode base64: {cause}"
        else:
            message = f"could not unmarshal json: {cause}"
        super().__init__(message)
        self.stage = stage
        self.cause = cause


def decode_payload(encoded: str) -> List[DirectoryEntry]:
    """
    Decode a base64 encoded JSON array of {username, id} records.

    Raises:
        DecodeError: stage 'base64' when the base64 layer is invalid,
            stage 'json' when the decoded bytes are not a valid record array
    """
    try:
        raw = base64.b64decode(encoded.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(DecodeError.BASE64, e) from e

    try:
        records = json.loads(raw.decode('utf-8'))
        if not isinstance(records, list):
            raise ValueError(f"expected a JSON array, got {type(records).__name__}")
        return [DirectoryEntryRecord.model_validate(record).to_entry() for record in records]
    except (UnicodeDecodeError, ValidationError, ValueError) as e:
        raise DecodeError(DecodeError.JSON, e) from e


class IdentityDirectory:
    """
    Read-only GitHub username → Slack id lookup.

    Safe for concurrent lookups: the mapping is never mutated after
    construction. When a username appears twice the first entry wins.
    """

    def __init__(self, entries: Iterable[DirectoryEntry] = ()):
        mapping = {}
        for entry in entries:
            if entry.username in mapping:
                logger.warning(f"Duplicate directory entry for {entry.username}, keeping the first")
                continue
            mapping[entry.username] = entry.slack_id
        self._entries: Mapping[str, str] = MappingProxyType(mapping)

    @classmethod
    def load(cls, encoded: str) -> "IdentityDirectory":
        """
        Build a directory from the encoded identity payload.

        Raises:
            DecodeError: If the payload is malformed
        """
        directory = cls(decode_payload(encoded))
        logger.info(f"Loaded identity directory with {len(directory)} entries")
        return directory

    def resolve(self, username: str) -> Optional[str]:
        """Return the Slack id for a GitHub username, or None if unknown."""
        return self._entries.get(username)

    @property
    def usernames(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, username: object) -> bool:
        return username in self._entries

    def __len__(self) -> int:
        return len(self._entries)
