"""
Named loggers.

A ``Logger`` is the long-lived, module-level logger of a component. It owns
a level configuration and a default field store, logs directly, and spawns
``RequestLogger`` instances that correlate the entries of one request.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional, Union

from chainlog.config.settings import LoggingSettings, get_settings
from chainlog.core.emitter import DiagnosticBuffer, EntryEmitter
from chainlog.core.fields import DefaultFields
from chainlog.core.levels import LevelConfig, Severity, SeverityLike
from chainlog.core.uids import deserialize_uids
from chainlog.infrastructure.logging.sinks import Sink, build_sink


class BaseLogger:
    """
    Logging surface shared by module-level and request-scoped loggers.

    Every call funnels through an ``EntryEmitter`` bound to this logger's
    level configuration, so level changes apply to the next call.

    Attributes:
        name: Component name, added to every entry as ``name``
        sink: Destination of the entries
        settings: Process-wide defaults this logger was built with
    """

    def __init__(
        self,
        name: str,
        levels: LevelConfig,
        default_fields: DefaultFields,
        sink: Sink,
        settings: LoggingSettings,
        buffer: Optional[DiagnosticBuffer] = None,
    ):
        self.name = name
        self.sink = sink
        self.settings = settings
        self._levels = levels
        self._default_fields = default_fields
        self._emitter = EntryEmitter(name, sink, levels, buffer)

    # Level configuration

    @property
    def level(self) -> Severity:
        return self._levels.filter_level

    @property
    def dump_threshold(self) -> Severity:
        return self._levels.dump_threshold

    @property
    def end_level(self) -> Severity:
        return self._levels.end_level

    def set_level(self, level: SeverityLike) -> None:
        """
        Change the filter level.

        Raises:
            InvalidLevel: If ``level`` is not one of the six severity tokens
        """
        self._levels.set_filter_level(level)

    def set_dump_threshold(self, level: SeverityLike) -> None:
        """
        Change the severity from which request loggers dump their buffer.

        Raises:
            InvalidLevel: If ``level`` is not one of the six severity tokens
        """
        self._levels.set_dump_threshold(level)

    def set_end_level(self, level: SeverityLike) -> None:
        self._levels.set_end_level(level)

    # Default fields

    def add_default_fields(self, fields: Mapping) -> None:
        """
        Merge ``fields`` into the fields added to every entry.

        A snapshot is stored; later changes to ``fields`` have no effect
        and ``fields`` itself is never modified.
        """
        self._default_fields.add(fields)

    def get_default_fields(self) -> Dict[str, Any]:
        return self._default_fields.collect()

    # Logging

    def _identity(self) -> Dict[str, Any]:
        return {"name": self.name}

    def log(self, severity: SeverityLike, message: Any, /, *args, **fields) -> None:
        """
        Log ``message`` at ``severity``.

        Fields can be given as one positional mapping, as keyword arguments,
        or both (keywords win). A malformed call (unknown severity, or
        positional extras that are not one mapping) never raises; it is
        replaced by a single fatal entry describing the misuse.
        """
        self._emitter.log(
            severity,
            message,
            args,
            fields,
            self._default_fields.collect(),
            self._identity(),
        )

    def trace(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.TRACE, message, *args, **fields)

    def debug(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.DEBUG, message, *args, **fields)

    def info(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.INFO, message, *args, **fields)

    def warn(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.WARN, message, *args, **fields)

    def error(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.ERROR, message, *args, **fields)

    def fatal(self, message: Any, /, *args, **fields) -> None:
        self.log(Severity.FATAL, message, *args, **fields)

    # stdlib / structlog spelling
    warning = warn
    critical = fatal


class Logger(BaseLogger):
    """
    Module-level logger identified by a name.

    Recognized configuration options:
        level: initial filter level (default from settings, ``info``)
        dump: dump threshold of spawned request loggers (``error``)
        end: level of ``RequestLogger.end`` entries (``info``)
        streams: non-empty list of sinks or writable text streams
            (default: stdout)

    Example:
        >>> log = Logger("storage", {"level": "debug"})
        >>> log.add_default_fields({"host": "node-1"})
        >>> req = log.new_request_logger()
        >>> req.info("object stored", {"bucket": "b1"})
        >>> req.end("request done")
    """

    def __init__(
        self,
        name: str,
        config: Optional[Mapping] = None,
        *,
        settings: Optional[LoggingSettings] = None,
    ):
        """
        Raises:
            InvalidLevel: If ``level``, ``dump`` or ``end`` is not a severity token
            InvalidStreamConfig: If ``streams`` is not a non-empty list of destinations
            TypeError: If ``config`` is not a mapping
        """
        settings = settings or get_settings()
        if config is None:
            config = {}
        if not isinstance(config, Mapping):
            raise TypeError(f"Logger config must be a mapping, got {type(config).__name__}")

        levels = LevelConfig(
            config.get("level", settings.level),
            config.get("dump", settings.dump_threshold),
            config.get("end", settings.end_level),
        )
        sink = build_sink(config.get("streams"), settings)
        super().__init__(name, levels, DefaultFields(), sink, settings)

    def new_request_logger(self, uids: Union[str, Iterable, None] = None) -> "RequestLogger":
        """
        Create a request logger inheriting this logger's levels and defaults.

        Args:
            uids: Ancestor identifiers, either serialized (``"A:B:"``) or as
                a sequence. A fresh identifier is always appended.

        Returns:
            RequestLogger whose ``get_uids()`` ends with its own identifier
        """
        from chainlog.request_logger import RequestLogger

        if uids is None:
            parent = ()
        elif isinstance(uids, str):
            parent = deserialize_uids(uids)
        else:
            parent = tuple(uids)

        return RequestLogger.spawn(
            name=self.name,
            levels=self._levels.copy(),
            default_fields=self._default_fields.copy(),
            sink=self.sink,
            settings=self.settings,
            parent_uids=parent,
        )

    def new_request_logger_from_serialized_uids(self, serialized_uids: str) -> "RequestLogger":
        """
        Continue a request received from another process.

        The restored chain becomes the ancestry of the new request logger,
        which appends its own identifier.
        """
        return self.new_request_logger(serialized_uids)
