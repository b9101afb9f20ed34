"""Resolve opaque ``changed_by`` ids to display names."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog_tracer.models import Agent, User
from catalog_tracer.services.query_guard import run_query
from catalog_tracer.utils.time import Deadline

SYSTEM_ACTOR_LABEL = "System"


class ActorNameResolver:
    """Two-directory lookup: staff accounts first, then external agents.

    ``resolve_many`` expects every distinct id of a page up front and issues at
    most one query per directory. Results are cached on the instance.
    """

    def __init__(self, db: Session, deadline: Deadline | None = None) -> None:
        self.db = db
        self.deadline = deadline
        self._names: dict[str, str | None] = {}

    def resolve(self, actor_id: str | None) -> str | None:
        if not actor_id:
            return None
        return self.resolve_many([actor_id])[actor_id]

    def resolve_many(self, actor_ids: Iterable[str | None]) -> dict[str, str | None]:
        wanted = list(dict.fromkeys(str(value) for value in actor_ids if value))
        pending = [actor_id for actor_id in wanted if actor_id not in self._names]

        if pending:
            found: dict[str, str] = {}
            staff = select(User.id, User.name).where(User.id.in_(pending))
            for row in run_query(self.db, staff, self.deadline, scalars=False):
                found[str(row.id)] = row.name

            missed = [actor_id for actor_id in pending if actor_id not in found]
            if missed:
                agents = select(Agent.id, Agent.name).where(Agent.id.in_(missed))
                for row in run_query(self.db, agents, self.deadline, scalars=False):
                    found[str(row.id)] = row.name

            for actor_id in pending:
                name = found.get(actor_id)
                if name is None and "@" in actor_id:
                    # Recorded before the account existed or after it was removed.
                    name = actor_id
                self._names[actor_id] = name

        return {actor_id: self._names[actor_id] for actor_id in wanted}


def actor_label(name: str | None) -> str:
    return name if name else SYSTEM_ACTOR_LABEL
