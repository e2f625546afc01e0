"""Shared in-memory database fixture and row factories for merge engine tests."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from graphmerge.db.base import Base
from graphmerge.models.entity import Entity
from graphmerge.models.entity_fact import EntityFact
from graphmerge.models.entity_identifier import EntityIdentifier
from graphmerge.models.message import Message


class DatabaseTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        self._reset_tables()

    def tearDown(self) -> None:
        self.db.close()

    def _reset_tables(self) -> None:
        for table in reversed(Base.metadata.sorted_tables):
            self.db.execute(table.delete())
        self.db.commit()

    def make_entity(
        self,
        name: str,
        *,
        type: str = "person",
        created_at: datetime | None = None,
        deleted: bool = False,
        identifiers: dict[str, str] | None = None,
        facts: dict[str, str] | None = None,
    ) -> Entity:
        entity = Entity(
            name=name,
            type=type,
            created_at=created_at or datetime(2026, 1, 1, tzinfo=timezone.utc),
            deleted_at=datetime(2026, 2, 1, tzinfo=timezone.utc) if deleted else None,
        )
        self.db.add(entity)
        self.db.flush()
        for identifier_type, identifier_value in (identifiers or {}).items():
            self.db.add(
                EntityIdentifier(
                    entity_id=entity.id,
                    identifier_type=identifier_type,
                    identifier_value=identifier_value,
                )
            )
        for fact_type, value in (facts or {}).items():
            self.db.add(EntityFact(entity_id=entity.id, fact_type=fact_type, value=value))
        self.db.commit()
        return entity

    def make_message(self, *, sender_id: int | None = None, recipient_id: int | None = None) -> Message:
        message = Message(chat_id="chat-1", content="hello", sender_entity_id=sender_id, recipient_entity_id=recipient_id)
        self.db.add(message)
        self.db.commit()
        return message

    def identifier_ids(self, entity_id: int) -> list[int]:
        return list(
            self.db.scalars(
                select(EntityIdentifier.id)
                .where(EntityIdentifier.entity_id == entity_id)
                .order_by(EntityIdentifier.id.asc())
            ).all()
        )

    def fact_ids(self, entity_id: int) -> list[int]:
        return list(
            self.db.scalars(
                select(EntityFact.id).where(EntityFact.entity_id == entity_id).order_by(EntityFact.id.asc())
            ).all()
        )
