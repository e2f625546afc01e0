"""Service-level tests for merge previews and conflict detection."""

from __future__ import annotations

from datetime import datetime, timezone

from support import DatabaseTestCase

from graphmerge.models.entity_fact import EntityFact
from graphmerge.models.entity_relation import EntityRelation, EntityRelationMember
from graphmerge.services.errors import EntityNotFoundError
from graphmerge.services.merge_preview import get_merge_preview


class MergePreviewTests(DatabaseTestCase):
    def test_differing_current_facts_produce_one_conflict(self) -> None:
        acme = self.make_entity("A", facts={"company": "Acme"})
        acme_corp = self.make_entity("B", facts={"company": "Acme Corp"})

        preview = get_merge_preview(self.db, acme_corp.id, acme.id)

        self.assertEqual(len(preview.conflicts), 1)
        conflict = preview.conflicts[0]
        self.assertEqual(conflict.field, "fact")
        self.assertEqual(conflict.type, "company")
        self.assertEqual(conflict.source_value, "Acme Corp")
        self.assertEqual(conflict.target_value, "Acme")

    def test_conflicts_are_symmetric(self) -> None:
        alice = self.make_entity(
            "Alice",
            identifiers={"telegram_username": "alice", "email": "a@example.com"},
            facts={"company": "Acme", "city": "Berlin"},
        )
        twin = self.make_entity(
            "Alice W",
            identifiers={"telegram_username": "alice_w", "phone": "+100"},
            facts={"company": "Acme Corp", "city": "Berlin", "title": "CTO"},
        )

        forward = get_merge_preview(self.db, alice.id, twin.id).conflicts
        backward = get_merge_preview(self.db, twin.id, alice.id).conflicts

        self.assertEqual(
            {(c.field, c.type, c.source_value, c.target_value) for c in forward},
            {
                ("identifier", "telegram_username", "alice", "alice_w"),
                ("fact", "company", "Acme", "Acme Corp"),
            },
        )
        self.assertEqual(
            {(c.field, c.type, c.source_value, c.target_value) for c in forward},
            {(c.field, c.type, c.target_value, c.source_value) for c in backward},
        )

    def test_historical_facts_do_not_conflict(self) -> None:
        alice = self.make_entity("Alice", facts={"company": "Acme"})
        twin = self.make_entity("Alice W")
        self.db.add(
            EntityFact(
                entity_id=twin.id,
                fact_type="company",
                value="Initech",
                valid_until=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )
        )
        self.db.commit()

        preview = get_merge_preview(self.db, twin.id, alice.id)

        self.assertEqual(preview.conflicts, [])
        self.assertEqual(preview.source.current_facts, [])

    def test_entity_data_includes_counts(self) -> None:
        alice = self.make_entity("Alice", identifiers={"email": "a@example.com"}, facts={"city": "Berlin"})
        bob = self.make_entity("Bob")
        self.make_message(sender_id=alice.id, recipient_id=bob.id)
        self.make_message(sender_id=bob.id, recipient_id=alice.id)
        relation = EntityRelation(relation_type="colleague")
        ended = EntityRelation(relation_type="employment")
        self.db.add_all([relation, ended])
        self.db.flush()
        self.db.add_all(
            [
                EntityRelationMember(relation_id=relation.id, entity_id=alice.id, role="member"),
                EntityRelationMember(relation_id=relation.id, entity_id=alice.id, role="lead"),
                EntityRelationMember(relation_id=relation.id, entity_id=bob.id, role="member"),
                EntityRelationMember(
                    relation_id=ended.id,
                    entity_id=alice.id,
                    role="employee",
                    valid_until=datetime(2025, 1, 1, tzinfo=timezone.utc),
                ),
            ]
        )
        self.db.commit()

        preview = get_merge_preview(self.db, alice.id, bob.id)

        self.assertEqual(preview.source.id, alice.id)
        self.assertEqual(preview.source.name, "Alice")
        self.assertEqual([row.identifier_value for row in preview.source.identifiers], ["a@example.com"])
        self.assertEqual([row.value for row in preview.source.current_facts], ["Berlin"])
        self.assertEqual(preview.source.message_count, 2)
        self.assertEqual(preview.source.relation_count, 1)
        self.assertEqual(preview.target.message_count, 2)
        self.assertEqual(preview.target.relation_count, 1)
        self.assertEqual(preview.conflicts, [])

    def test_missing_or_deleted_entity_raises_not_found(self) -> None:
        alice = self.make_entity("Alice")
        merged = self.make_entity("Telegram 555", deleted=True)

        with self.assertRaises(EntityNotFoundError):
            get_merge_preview(self.db, 9999, alice.id)
        with self.assertRaises(EntityNotFoundError):
            get_merge_preview(self.db, merged.id, alice.id)
        with self.assertRaises(EntityNotFoundError):
            get_merge_preview(self.db, alice.id, 9999)
