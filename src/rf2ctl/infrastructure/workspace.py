"""Workspace — the single dependency injected into every service.

Owns one processing session: the stated/inferred :class:`ConceptGraphs`,
the :class:`GroupHasher`, and a lazily built :class:`GraphEngine` per
view. The hash provider is constructed eagerly so a bad namespace fails
before any release row is read.

Graphs are loaded from the configured release files on first access
(write phase), after which services only query them (read phase).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rf2ctl.config.discovery import find_release_files
from rf2ctl.config.logging import release_context
from rf2ctl.domain.hashing import GroupHasher, HashProvider, Type5UuidProvider
from rf2ctl.domain.types import Characteristic
from rf2ctl.infrastructure.graph.engine import GraphEngine
from rf2ctl.infrastructure.registry import ConceptGraphs
from rf2ctl.infrastructure.rf2 import read_relationships

if TYPE_CHECKING:
    from pathlib import Path

    from rf2ctl.config.settings import Rf2Settings

logger = logging.getLogger(__name__)


class Workspace:
    """Concept graphs plus the collaborators needed to query them."""

    def __init__(
        self,
        settings: Rf2Settings,
        *,
        graphs: ConceptGraphs | None = None,
        provider: HashProvider | None = None,
    ) -> None:
        self.settings = settings
        self.hasher = GroupHasher(provider or Type5UuidProvider(settings.hash.namespace))
        self._graphs = graphs
        self._engines: dict[Characteristic, GraphEngine] = {}

    @property
    def root_concept_id(self) -> int:
        return self.settings.hierarchy.root_concept_id

    def release_files(self) -> dict[Characteristic, Path]:
        """Release files by view, resolved against the workspace root.

        An explicitly configured file wins; views without one fall back to
        the files found under ``[release] directory``.
        """
        release = self.settings.release
        files: dict[Characteristic, Path] = {}
        directory = self.settings.resolve_release_path(release.directory)
        if directory is not None:
            files.update(find_release_files(directory, release_type=release.release_type))
        for characteristic, name in (
            (Characteristic.STATED, release.stated_file),
            (Characteristic.INFERRED, release.inferred_file),
        ):
            path = self.settings.resolve_release_path(name)
            if path is not None:
                files[characteristic] = path
        return files

    @property
    def graphs(self) -> ConceptGraphs:
        """The session's concept graphs, loaded from release files on first access.

        Raises:
            Rf2FormatError: A release file is malformed.
            OSError: A release file cannot be read.
        """
        if self._graphs is None:
            self._graphs = self._load()
        return self._graphs

    def _load(self) -> ConceptGraphs:
        graphs = ConceptGraphs()
        active_only = self.settings.release.active_only
        for characteristic, path in self.release_files().items():
            with release_context(characteristic, path):
                logger.debug("Loading %s relationships from %s", characteristic, path)
                count = graphs.register_all(read_relationships(path, active_only=active_only))
                logger.debug(
                    "Loaded %d rows, %d concepts",
                    count,
                    len(graphs.registry(characteristic)),
                )
        return graphs

    @property
    def is_loaded(self) -> bool:
        return self._graphs is not None

    def engine(self, characteristic: Characteristic) -> GraphEngine:
        """The is-a graph engine of one view (created lazily)."""
        characteristic = Characteristic(characteristic)
        engine = self._engines.get(characteristic)
        if engine is None:
            engine = GraphEngine(self.graphs.registry(characteristic))
            self._engines[characteristic] = engine
        return engine
