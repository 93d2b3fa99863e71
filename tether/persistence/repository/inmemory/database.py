"""Shared in-memory store for the in-memory repositories."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from tether.domain.model import Account, Identity
from tether.domain.value import AccountId, IdentityId

_MISSING = object()

# (table, key, previous row or _MISSING) for each write of the current scope
UndoLog = list[tuple[dict, Any, Any]]

_undo_log: ContextVar[UndoLog | None] = ContextVar("inmemory_undo_log", default=None)


@dataclass
class InMemoryDatabase:
    """Rows held by id, shared by every repository built on it.

    Sharing one instance lets a test container keep state across requests
    and lets the in-memory unit of work roll back all repositories at once.
    Repositories write through put_account/put_identity so that a failing
    scope can undo exactly the rows it wrote.
    """

    accounts: dict[AccountId, Account] = field(default_factory=dict)
    identities: dict[IdentityId, Identity] = field(default_factory=dict)

    def put_account(self, account: Account) -> None:
        self._write(self.accounts, account.id, account)

    def put_identity(self, identity: Identity) -> None:
        self._write(self.identities, identity.id, identity)

    @contextmanager
    def undo_scope(self) -> Iterator[None]:
        """Undo this scope's writes if the block raises.

        The log lives in a context variable, so concurrent tasks each undo
        only their own writes. A nested scope that succeeds hands its writes
        to the enclosing one.
        """
        parent = _undo_log.get()
        log: UndoLog = []
        token = _undo_log.set(log)
        try:
            yield
        except BaseException:
            for table, key, previous in reversed(log):
                if previous is _MISSING:
                    table.pop(key, None)
                else:
                    table[key] = previous
            raise
        else:
            if parent is not None:
                parent.extend(log)
        finally:
            _undo_log.reset(token)

    def _write(self, table: dict, key: Any, row: Any) -> None:
        log = _undo_log.get()
        if log is not None:
            log.append((table, key, table.get(key, _MISSING)))
        table[key] = row
