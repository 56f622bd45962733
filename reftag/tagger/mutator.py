from __future__ import annotations

from typing import Protocol

from reftag.core.result import Err, Ok, Result
from reftag.github.http import HttpError
from reftag.github.store import MatchingRef, RefStore
from reftag.output.console import ConsoleProtocol
from reftag.tagger.model import Namespace, latest_ref_name


class RefMutator(Protocol):
    def create_or_update_ref(self, name: str, commit_id: str) -> Result[None, HttpError]: ...

    def delete_ref(self, name: str) -> Result[None, HttpError]: ...

    def unlink_latest_if_matching(self, commit_id: str) -> Result[bool, HttpError]:
        """Delete ``latest`` only if it points at ``commit_id`` (or, for a tag
        object id, at the commit behind it); True if deleted."""
        ...


class StoreRefMutator:
    """Applies ref changes through a ``RefStore``.

    Ref names are given without the ``refs/`` prefix (``tags/v3``,
    ``heads/latest``). Every operation is safe to repeat.
    """

    def __init__(self, store: RefStore, namespace: Namespace, console: ConsoleProtocol) -> None:
        self._store = store
        self._namespace = namespace
        self._console = console

    def _find(self, name: str) -> Result[MatchingRef | None, HttpError]:
        matching = self._store.list_matching_refs(name)
        if isinstance(matching, Err):
            return matching
        # matching-refs is a prefix match: tags/v1 also returns tags/v10.
        full = f"refs/{name}"
        return Ok(next((m for m in matching.value if m.ref == full), None))

    def create_or_update_ref(self, name: str, commit_id: str) -> Result[None, HttpError]:
        found = self._find(name)
        if isinstance(found, Err):
            return found

        existing = found.value
        if existing is None:
            self._console.info(f"Creating ref: refs/{name} for: {commit_id}")
            result = self._store.create_ref(f"refs/{name}", commit_id)
        elif existing.object_sha == commit_id:
            self._console.debug(f"{name} already points to: {commit_id}")
            return Ok(None)
        else:
            self._console.info(f"Updating ref: {name} to: {commit_id}")
            result = self._store.update_ref(existing.ref, commit_id, force=True)

        if isinstance(result, Err):
            return result
        self._console.debug(f"refs/{name} now points to: {commit_id}")
        return Ok(None)

    def delete_ref(self, name: str) -> Result[None, HttpError]:
        found = self._find(name)
        if isinstance(found, Err):
            return found
        if found.value is None:
            self._console.debug(f"{name} does not exist, nothing to delete")
            return Ok(None)

        self._console.info(f"Deleting ref: {name}")
        return self._store.delete_ref(found.value.ref)

    def unlink_latest_if_matching(self, commit_id: str) -> Result[bool, HttpError]:
        name = latest_ref_name(self._namespace)
        found = self._find(name)
        if isinstance(found, Err):
            return found

        latest = found.value
        if latest is None:
            return Ok(False)
        if latest.object_sha != commit_id:
            # A deleted annotated tag reports its tag object, latest holds the commit.
            peeled = self._store.peel_commit(commit_id)
            if isinstance(peeled, Err):
                return peeled
            if latest.object_sha != peeled.value:
                self._console.debug(f"{name} points to {latest.object_sha}, keeping it")
                return Ok(False)
            commit_id = peeled.value

        self._console.info(f"Deleting ref: {name} (pointed to removed {commit_id})")
        deleted = self._store.delete_ref(latest.ref)
        if isinstance(deleted, Err):
            return deleted
        return Ok(True)
