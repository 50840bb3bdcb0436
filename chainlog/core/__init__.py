"""
Level filtering and request correlation core.

- levels: severity scale and per-logger level configuration
- fields: default field store
- uids: request identifier chains and their wire format
- emitter: emit / suppress / dump decision and misuse tolerance
"""

from .levels import Severity, LevelConfig, compare, is_valid, to_severity, LEVEL_TOKENS
from .fields import DefaultFields
from .uids import RequestChain, generate_uid, serialize_uids, deserialize_uids, UID_SEPARATOR
from .emitter import EntryEmitter, LogEntry, DiagnosticBuffer, FieldsArgument, ArgumentKind

__all__ = [
    'Severity',
    'LevelConfig',
    'compare',
    'is_valid',
    'to_severity',
    'LEVEL_TOKENS',
    'DefaultFields',
    'RequestChain',
    'generate_uid',
    'serialize_uids',
    'deserialize_uids',
    'UID_SEPARATOR',
    'EntryEmitter',
    'LogEntry',
    'DiagnosticBuffer',
    'FieldsArgument',
    'ArgumentKind',
]
