"""Service-level tests for duplicate entity detection and suggestion grouping."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from support import DatabaseTestCase

from graphmerge.entity_resolution.strategies import (
    ORPHANED_IDENTIFIER_REASON,
    SHARED_IDENTIFIER_REASON,
    CandidateRow,
    OrphanedIdentifierStrategy,
    SharedIdentifierStrategy,
)
from graphmerge.services.merge_dismissals import dismiss_merge_suggestion
from graphmerge.services.merge_suggestions import group_candidate_rows, list_merge_suggestions


def _group_signature(response) -> set[tuple[int, str, frozenset[int]]]:
    return {
        (
            group.primary_entity.id,
            group.reason,
            frozenset(candidate.id for candidate in group.candidates),
        )
        for group in response.groups
    }


class OrphanedIdentifierDetectionTests(DatabaseTestCase):
    def test_orphan_named_after_numeric_identifier_is_suggested(self) -> None:
        primary = self.make_entity("Alice", identifiers={"telegram_user_id": "555"})
        orphan = self.make_entity("Telegram 555")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 1)
        self.assertEqual(len(response.groups), 1)
        group = response.groups[0]
        self.assertEqual(group.primary_entity.id, primary.id)
        self.assertEqual(group.primary_entity.name, "Alice")
        self.assertEqual(
            [(row.identifier_type, row.identifier_value) for row in group.primary_entity.identifiers],
            [("telegram_user_id", "555")],
        )
        self.assertEqual(group.reason, ORPHANED_IDENTIFIER_REASON)
        self.assertEqual([candidate.id for candidate in group.candidates], [orphan.id])
        self.assertEqual(group.candidates[0].matched_value, "555")
        self.assertEqual(group.candidates[0].reason, ORPHANED_IDENTIFIER_REASON)

    def test_custom_prefix_and_identifier_type(self) -> None:
        primary = self.make_entity("A", identifiers={"platform_id": "555"})
        orphan = self.make_entity("Platform 555")
        strategy = OrphanedIdentifierStrategy(name_prefix="Platform ", identifier_type="platform_id")

        response = list_merge_suggestions(self.db, limit=10, offset=0, strategies=[strategy])

        self.assertEqual(_group_signature(response), {(primary.id, ORPHANED_IDENTIFIER_REASON, frozenset({orphan.id}))})

    def test_orphan_that_owns_an_identifier_of_the_type_is_ignored(self) -> None:
        self.make_entity("Alice", identifiers={"telegram_user_id": "555"})
        self.make_entity("Telegram 555", identifiers={"telegram_user_id": "777"})
        self.make_entity("Telegram 55x")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 0)
        self.assertEqual(response.groups, [])

    def test_soft_deleted_entities_are_excluded(self) -> None:
        self.make_entity("Alice", identifiers={"telegram_user_id": "555"})
        self.make_entity("Telegram 555", deleted=True)
        self.make_entity("Gone", identifiers={"telegram_user_id": "777"}, deleted=True)
        self.make_entity("Telegram 777")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 0)

    def test_candidates_carry_message_counts_and_newest_first_order(self) -> None:
        primary = self.make_entity("Alice", identifiers={"telegram_user_id": "555", "telegram_username": "alice"})
        older = self.make_entity("Telegram 555", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
        newer = self.make_entity("@Alice", created_at=datetime(2026, 3, 1, tzinfo=timezone.utc))
        self.make_message(sender_id=older.id, recipient_id=primary.id)
        self.make_message(sender_id=older.id)
        self.make_message(sender_id=primary.id, recipient_id=older.id)
        self.make_message(sender_id=older.id, recipient_id=older.id)

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 1)
        group = response.groups[0]
        self.assertEqual([candidate.id for candidate in group.candidates], [newer.id, older.id])
        counts = {candidate.id: candidate.message_count for candidate in group.candidates}
        self.assertEqual(counts, {newer.id: 0, older.id: 4})


class SharedIdentifierDetectionTests(DatabaseTestCase):
    def test_display_name_matching_username_is_suggested(self) -> None:
        primary = self.make_entity("John Doe", identifiers={"telegram_username": "JohnDoe"})
        duplicate = self.make_entity("@johndoe")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(_group_signature(response), {(primary.id, SHARED_IDENTIFIER_REASON, frozenset({duplicate.id}))})
        self.assertEqual(response.groups[0].candidates[0].matched_value, "JohnDoe")

    def test_short_names_and_own_identifiers_are_ignored(self) -> None:
        self.make_entity("Jo", identifiers={"telegram_username": "jo"})
        self.make_entity("@jo")
        self.make_entity("maria", identifiers={"telegram_username": "maria"})

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 0)

    def test_min_length_is_configurable(self) -> None:
        primary = self.make_entity("Jo", identifiers={"telegram_username": "jo"})
        duplicate = self.make_entity("@jo")
        strategy = SharedIdentifierStrategy(identifier_type="telegram_username", min_length=2)

        response = list_merge_suggestions(self.db, limit=50, offset=0, strategies=[strategy])

        self.assertEqual(_group_signature(response), {(primary.id, SHARED_IDENTIFIER_REASON, frozenset({duplicate.id}))})

    def test_soft_deleted_entities_are_ignored(self) -> None:
        self.make_entity("John Doe", identifiers={"telegram_username": "johndoe"})
        self.make_entity("@johndoe", deleted=True)
        self.make_entity("Gone", deleted=True, identifiers={"telegram_username": "ghost"})
        self.make_entity("@ghost")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 0)
        self.assertEqual(response.groups, [])

    def test_only_at_sign_and_whitespace_are_stripped(self) -> None:
        primary = self.make_entity("John Doe", identifiers={"telegram_username": "john.doe"})
        dotted = self.make_entity(" @john.doe ")
        self.make_entity("johndoe")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(_group_signature(response), {(primary.id, SHARED_IDENTIFIER_REASON, frozenset({dotted.id}))})


class SuggestionGroupingTests(DatabaseTestCase):
    def test_both_strategies_merge_into_one_group_per_primary(self) -> None:
        primary = self.make_entity("Alice", identifiers={"telegram_user_id": "555", "telegram_username": "alice_w"})
        orphan = self.make_entity("Telegram 555")
        handle = self.make_entity("alice_w")

        response = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(response.total, 1)
        group = response.groups[0]
        self.assertEqual(group.primary_entity.id, primary.id)
        self.assertEqual(group.reason, ORPHANED_IDENTIFIER_REASON)
        reasons = {candidate.id: candidate.reason for candidate in group.candidates}
        self.assertEqual(reasons, {orphan.id: ORPHANED_IDENTIFIER_REASON, handle.id: SHARED_IDENTIFIER_REASON})

    def test_strategy_order_does_not_change_grouping(self) -> None:
        self.make_entity("Alice", identifiers={"telegram_user_id": "555", "telegram_username": "alice_w"})
        self.make_entity("Telegram 555")
        self.make_entity("alice_w")
        self.make_entity("Bob", identifiers={"telegram_username": "bobby"})
        self.make_entity("@Bobby")
        orphan = OrphanedIdentifierStrategy(name_prefix="Telegram ", identifier_type="telegram_user_id")
        shared = SharedIdentifierStrategy(identifier_type="telegram_username", min_length=3)

        forward = list_merge_suggestions(self.db, limit=50, offset=0, strategies=[orphan, shared])
        backward = list_merge_suggestions(self.db, limit=50, offset=0, strategies=[shared, orphan])

        self.assertEqual(forward.total, backward.total)
        self.assertEqual(
            {(primary, frozenset(ids)) for primary, _, ids in _group_signature(forward)},
            {(primary, frozenset(ids)) for primary, _, ids in _group_signature(backward)},
        )

    def test_detection_is_deterministic(self) -> None:
        self.make_entity("Alice", identifiers={"telegram_user_id": "555"})
        self.make_entity("Telegram 555")
        self.make_entity("Bob", identifiers={"telegram_username": "bobby"})
        self.make_entity("bobby")

        first = list_merge_suggestions(self.db, limit=50, offset=0)
        second = list_merge_suggestions(self.db, limit=50, offset=0)

        self.assertEqual(first.total, 2)
        self.assertEqual(_group_signature(first), _group_signature(second))

    def test_pagination_counts_distinct_primaries(self) -> None:
        primaries = []
        for index, user_id in enumerate(["101", "102", "103"]):
            primaries.append(self.make_entity(f"Person {index}", identifiers={"telegram_user_id": user_id}))
            self.make_entity(f"Telegram {user_id}")
        self.make_entity("Telegram 101", created_at=datetime(2026, 4, 1, tzinfo=timezone.utc))

        first_page = list_merge_suggestions(self.db, limit=2, offset=0)
        second_page = list_merge_suggestions(self.db, limit=2, offset=2)

        self.assertEqual(first_page.total, 3)
        self.assertEqual(second_page.total, 3)
        self.assertEqual([group.primary_entity.id for group in first_page.groups], [primaries[0].id, primaries[1].id])
        self.assertEqual([group.primary_entity.id for group in second_page.groups], [primaries[2].id])
        self.assertEqual(len(first_page.groups[0].candidates), 2)

    def test_dismissed_pair_is_no_longer_suggested(self) -> None:
        primary = self.make_entity("Alice", identifiers={"telegram_user_id": "555"})
        orphan = self.make_entity("Telegram 555")
        self.assertEqual(list_merge_suggestions(self.db, limit=50, offset=0).total, 1)

        dismiss_merge_suggestion(self.db, primary.id, orphan.id)

        response = list_merge_suggestions(self.db, limit=50, offset=0)
        self.assertEqual(response.total, 0)
        self.assertEqual(response.groups, [])

    def test_strategy_run_pages_on_its_own_primaries(self) -> None:
        first = self.make_entity("Alice", identifiers={"telegram_user_id": "1"})
        self.make_entity("Telegram 1")
        self.make_entity("Bob", identifiers={"telegram_user_id": "2"})
        self.make_entity("Telegram 2")
        strategy = OrphanedIdentifierStrategy(name_prefix="Telegram ", identifier_type="telegram_user_id")

        page = strategy.run(self.db, limit=1, offset=0)

        self.assertEqual(page.total, 2)
        self.assertEqual([row.primary_id for row in page.rows], [first.id])
        self.assertEqual(page.rows[0].reason, ORPHANED_IDENTIFIER_REASON)


class GroupCandidateRowsTests(unittest.TestCase):
    def _row(self, candidate_id: int, primary_id: int, reason: str, day: int) -> CandidateRow:
        return CandidateRow(
            candidate_id=candidate_id,
            candidate_name=f"candidate {candidate_id}",
            candidate_created_at=datetime(2026, 1, day, tzinfo=timezone.utc),
            matched_value="x",
            primary_id=primary_id,
            reason=reason,
        )

    def test_grouping_is_commutative_and_idempotent(self) -> None:
        rows = [
            self._row(10, 1, SHARED_IDENTIFIER_REASON, 2),
            self._row(10, 1, ORPHANED_IDENTIFIER_REASON, 2),
            self._row(11, 1, SHARED_IDENTIFIER_REASON, 5),
            self._row(12, 2, SHARED_IDENTIFIER_REASON, 3),
        ]
        priority = [ORPHANED_IDENTIFIER_REASON, SHARED_IDENTIFIER_REASON]

        forward = group_candidate_rows(rows, priority)
        backward = group_candidate_rows(list(reversed(rows)), priority)
        doubled = group_candidate_rows(rows + rows, priority)

        self.assertEqual(forward, backward)
        self.assertEqual(forward, doubled)
        reason, candidates = forward[1]
        self.assertEqual(reason, ORPHANED_IDENTIFIER_REASON)
        self.assertEqual(
            [(row.candidate_id, row.reason) for row in candidates],
            [(11, SHARED_IDENTIFIER_REASON), (10, ORPHANED_IDENTIFIER_REASON)],
        )
        self.assertEqual(forward[2][0], SHARED_IDENTIFIER_REASON)
