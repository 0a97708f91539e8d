"""
Catalog - The configured search engines plus the selected default.

The catalog is a plain in-memory collection. Engines keep insertion
order and duplicate names are allowed; whether a duplicate may be added
is decided by the caller (see the `add --force` command).

The default engine is stored by name. It is validated when set, but
removing the engine it names does not clear it: default() then simply
returns None.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from termsearch.errors import EmptyCatalog, IndexOutOfBounds, MalformedConfig, NotFound
from termsearch.search.engine import ENGINE_FIELDS, Engine


@dataclass
class Catalog:
    """
    Ordered collection of engines bound to a catalog file.

    Attributes:
        engines: Engines in insertion order
        default_engine: Name of the default engine, if one was chosen
        path: File the catalog was loaded from (not serialized, not compared)
    """
    engines: list[Engine] = field(default_factory=list)
    default_engine: Optional[str] = None
    path: Optional[Path] = field(default=None, compare=False)

    def push(self, engine: Engine) -> None:
        """Append an engine. Duplicate names are accepted."""
        self.engines.append(engine)
        logger.debug(f"Pushed engine '{engine.name}' ({engine.id})")

    def remove_where_name(self, name: str) -> int:
        """
        Remove every engine with the given name.

        Returns:
            Number of engines removed (zero is not an error)

        Raises:
            EmptyCatalog: If the catalog has no engines
        """
        return self._remove_where(lambda engine: engine.name == name, name)

    def remove_where_id(self, engine_id: str) -> int:
        """Remove every engine with the given id. Same contract as remove_where_name."""
        return self._remove_where(lambda engine: engine.id == engine_id, engine_id)

    def _remove_where(self, predicate, label: str) -> int:
        if not self.engines:
            logger.info("Attempting to remove an engine from an empty catalog")
            raise EmptyCatalog("There are no engines to remove")

        before = len(self.engines)
        self.engines = [engine for engine in self.engines if not predicate(engine)]
        removed = before - len(self.engines)
        logger.info(f"Removed {removed} engine(s) matching '{label}'")
        return removed

    def remove_at(self, index: int) -> Engine:
        """
        Remove the engine at a position.

        Returns:
            The removed engine

        Raises:
            IndexOutOfBounds: If the catalog is empty or index is outside it
        """
        if index < 0 or index >= len(self.engines):
            raise IndexOutOfBounds(
                f"Index {index} is out of bounds for {len(self.engines)} engine(s)"
            )
        return self.engines.pop(index)

    def names(self) -> list[str]:
        return [engine.name for engine in self.engines]

    def patterns(self) -> list[str]:
        return [engine.pattern for engine in self.engines]

    def url_patterns(self) -> list[str]:
        return [engine.url_pattern for engine in self.engines]

    def regexes(self) -> list[str]:
        return [engine.regex for engine in self.engines]

    def replacements(self) -> list[str]:
        return [engine.replacement for engine in self.engines]

    def where_name(self, name: str) -> Engine:
        """
        Get the first engine with the given name.

        Raises:
            NotFound: If no engine has that name
        """
        for engine in self.engines:
            if engine.name == name:
                return engine
        raise NotFound(f"There is no engine named '{name}'")

    def where_id(self, engine_id: str) -> Engine:
        for engine in self.engines:
            if engine.id == engine_id:
                return engine
        raise NotFound(f"There is no engine with id '{engine_id}'")

    def default(self) -> Optional[Engine]:
        """
        Get the default engine.

        Returns:
            The engine named by default_engine, or None if no default is
            set or the name no longer resolves
        """
        if self.default_engine is None:
            return None
        try:
            return self.where_name(self.default_engine)
        except NotFound:
            logger.warning(f"Default engine '{self.default_engine}' is not in the catalog")
            return None

    def set_default(self, name: str) -> None:
        """
        Set the default engine by name.

        Raises:
            NotFound: If no engine has that name (the default is left unchanged)
        """
        if name not in self.names():
            raise NotFound(f"The engine '{name}' is not included in the settings")
        self.default_engine = name
        logger.info(f"Default engine set to '{name}'")

    def to_dict(self) -> dict:
        """Serialize to the file shape. Empty fields are omitted."""
        data = {}
        if self.default_engine is not None:
            data["default_engine"] = self.default_engine
        if self.engines:
            data["engines"] = [engine.to_dict() for engine in self.engines]
        return data

    @classmethod
    def from_dict(cls, data: dict, path: Optional[Path] = None) -> "Catalog":
        """
        Build a catalog from its serialized shape.

        Raises:
            MalformedConfig: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise MalformedConfig("Catalog document must be a table")

        default_engine = data.get("default_engine")
        if default_engine is not None and not isinstance(default_engine, str):
            raise MalformedConfig("'default_engine' must be a string")

        records = data.get("engines", [])
        if not isinstance(records, list):
            raise MalformedConfig("'engines' must be an array of tables")

        engines = []
        for position, record in enumerate(records):
            if not isinstance(record, dict):
                raise MalformedConfig(f"Engine #{position} is not a table")
            missing = [name for name in ENGINE_FIELDS if name not in record]
            if missing:
                raise MalformedConfig(f"Engine #{position} is missing {', '.join(missing)}")
            values = {name: record[name] for name in ENGINE_FIELDS}
            for name, value in values.items():
                if not isinstance(value, str):
                    raise MalformedConfig(f"Engine #{position} field '{name}' must be a string")
            engines.append(Engine(**values))

        return cls(engines=engines, default_engine=default_engine, path=path)
