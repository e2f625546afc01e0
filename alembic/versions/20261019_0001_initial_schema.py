"""initial schema

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def _timestamps(updated: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False)
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "entities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("profile_photo", sa.Text(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("merged_into_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["merged_into_id"], ["entities.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_entities_name", "entities", ["name"], unique=False)
    op.create_index("ix_entities_deleted_at", "entities", ["deleted_at"], unique=False)
    op.create_index("ix_entities_merged_into_id", "entities", ["merged_into_id"], unique=False)

    op.create_table(
        "entity_identifiers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("identifier_type", sa.String(length=50), nullable=False),
        sa.Column("identifier_value", sa.String(length=255), nullable=False),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("identifier_type", "identifier_value", name="uq_entity_identifiers_type_value"),
        sa.UniqueConstraint("entity_id", "identifier_type", name="uq_entity_identifiers_entity_type"),
    )
    op.create_index("ix_entity_identifiers_entity_id", "entity_identifiers", ["entity_id"], unique=False)

    op.create_table(
        "entity_facts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("fact_type", sa.String(length=50), nullable=False),
        sa.Column("value", sa.String(length=500), nullable=True),
        sa.Column("source", sa.String(length=20), nullable=False),
        sa.Column("rank", sa.String(length=20), nullable=False),
        sa.Column("confidence", sa.Float(), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_entity_facts_entity_id", "entity_facts", ["entity_id"], unique=False)
    op.create_index("ix_entity_facts_fact_type", "entity_facts", ["fact_type"], unique=False)
    op.create_index("ix_entity_facts_entity_type", "entity_facts", ["entity_id", "fact_type"], unique=False)

    op.create_table(
        "dismissed_merge_suggestions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("primary_entity_id", sa.Integer(), nullable=False),
        sa.Column("dismissed_entity_id", sa.Integer(), nullable=False),
        sa.Column("dismissed_by", sa.String(length=100), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["primary_entity_id"], ["entities.id"]),
        sa.ForeignKeyConstraint(["dismissed_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "primary_entity_id",
            "dismissed_entity_id",
            name="uq_dismissed_merge_suggestions_pair",
        ),
    )
    op.create_index(
        "ix_dismissed_merge_suggestions_primary_entity_id",
        "dismissed_merge_suggestions",
        ["primary_entity_id"],
        unique=False,
    )
    op.create_index(
        "ix_dismissed_merge_suggestions_dismissed_entity_id",
        "dismissed_merge_suggestions",
        ["dismissed_entity_id"],
        unique=False,
    )

    op.create_table(
        "entity_merge_audits",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("source_entity_id", sa.Integer(), nullable=False),
        sa.Column("target_entity_id", sa.Integer(), nullable=False),
        sa.Column("identifiers_moved", sa.Integer(), nullable=False),
        sa.Column("facts_moved", sa.Integer(), nullable=False),
        sa.Column("resolutions_json", sa.JSON(), nullable=False),
        sa.Column("details_json", sa.JSON(), nullable=False),
        sa.Column("merged_by", sa.String(length=100), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_entity_merge_audits_source_entity_id", "entity_merge_audits", ["source_entity_id"], unique=False)
    op.create_index("ix_entity_merge_audits_target_entity_id", "entity_merge_audits", ["target_entity_id"], unique=False)

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.String(length=100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("sender_entity_id", sa.Integer(), nullable=True),
        sa.Column("recipient_entity_id", sa.Integer(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["sender_entity_id"], ["entities.id"]),
        sa.ForeignKeyConstraint(["recipient_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_messages_chat_id", "messages", ["chat_id"], unique=False)
    op.create_index("ix_messages_sender_entity_id", "messages", ["sender_entity_id"], unique=False)
    op.create_index("ix_messages_recipient_entity_id", "messages", ["recipient_entity_id"], unique=False)
    op.create_index("ix_messages_timestamp", "messages", ["timestamp"], unique=False)

    op.create_table(
        "entity_relations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("relation_type", sa.String(length=50), nullable=False),
        sa.Column("source", sa.String(length=20), nullable=False),
        sa.Column("metadata_json", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "entity_relation_members",
        sa.Column("relation_id", sa.Integer(), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("label", sa.String(length=100), nullable=True),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["relation_id"], ["entity_relations.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("relation_id", "entity_id", "role"),
    )
    op.create_index("ix_entity_relation_members_entity", "entity_relation_members", ["entity_id"], unique=False)

    op.create_table(
        "interaction_participants",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("interaction_id", sa.Integer(), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("identifier_type", sa.String(length=50), nullable=False),
        sa.Column("identifier_value", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_interaction_participants_interaction_id", "interaction_participants", ["interaction_id"], unique=False
    )
    op.create_index("ix_interaction_participants_entity_id", "interaction_participants", ["entity_id"], unique=False)

    op.create_table(
        "group_memberships",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("chat_id", sa.String(length=100), nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=True),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("left_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("chat_id", "entity_id", name="uq_group_memberships_chat_entity"),
    )
    op.create_index("ix_group_memberships_chat_id", "group_memberships", ["chat_id"], unique=False)
    op.create_index("ix_group_memberships_entity_id", "group_memberships", ["entity_id"], unique=False)

    op.create_table(
        "activities",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=500), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("owner_entity_id", sa.Integer(), nullable=False),
        sa.Column("client_entity_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["owner_entity_id"], ["entities.id"]),
        sa.ForeignKeyConstraint(["client_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activities_owner_entity_id", "activities", ["owner_entity_id"], unique=False)
    op.create_index("ix_activities_client_entity_id", "activities", ["client_entity_id"], unique=False)

    op.create_table(
        "commitments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("from_entity_id", sa.Integer(), nullable=False),
        sa.Column("to_entity_id", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["from_entity_id"], ["entities.id"]),
        sa.ForeignKeyConstraint(["to_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_commitments_from_entity_id", "commitments", ["from_entity_id"], unique=False)
    op.create_index("ix_commitments_to_entity_id", "commitments", ["to_entity_id"], unique=False)

    op.create_table(
        "entity_events",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("related_entity_id", sa.Integer(), nullable=True),
        sa.Column("event_type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("event_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.ForeignKeyConstraint(["related_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_entity_events_entity_id", "entity_events", ["entity_id"], unique=False)
    op.create_index("ix_entity_events_related_entity_id", "entity_events", ["related_entity_id"], unique=False)

    op.create_table(
        "transcript_segments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("interaction_id", sa.Integer(), nullable=False),
        sa.Column("speaker_label", sa.String(length=50), nullable=False),
        sa.Column("speaker_entity_id", sa.Integer(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("start_time", sa.Float(), nullable=False),
        sa.Column("end_time", sa.Float(), nullable=False),
        *_timestamps(updated=False),
        sa.ForeignKeyConstraint(["speaker_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transcript_segments_interaction_id", "transcript_segments", ["interaction_id"], unique=False)
    op.create_index(
        "ix_transcript_segments_speaker_entity_id", "transcript_segments", ["speaker_entity_id"], unique=False
    )

    op.create_table(
        "pending_entity_resolutions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("identifier_type", sa.String(length=50), nullable=False),
        sa.Column("identifier_value", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("resolved_entity_id", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["resolved_entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_pending_entity_resolutions_resolved_entity_id",
        "pending_entity_resolutions",
        ["resolved_entity_id"],
        unique=False,
    )

    op.create_table(
        "entity_relationship_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("entity_id", sa.Integer(), nullable=False),
        sa.Column("relationship_type", sa.String(length=30), nullable=False),
        sa.Column("relationship_summary", sa.Text(), nullable=False),
        sa.Column("total_messages", sa.Integer(), nullable=False),
        sa.Column("top_topics_json", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["entity_id"], ["entities.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_entity_relationship_profiles_entity_id", "entity_relationship_profiles", ["entity_id"], unique=True
    )


def downgrade() -> None:
    op.drop_index("ix_entity_relationship_profiles_entity_id", table_name="entity_relationship_profiles")
    op.drop_table("entity_relationship_profiles")
    op.drop_index("ix_pending_entity_resolutions_resolved_entity_id", table_name="pending_entity_resolutions")
    op.drop_table("pending_entity_resolutions")
    op.drop_index("ix_transcript_segments_speaker_entity_id", table_name="transcript_segments")
    op.drop_index("ix_transcript_segments_interaction_id", table_name="transcript_segments")
    op.drop_table("transcript_segments")
    op.drop_index("ix_entity_events_related_entity_id", table_name="entity_events")
    op.drop_index("ix_entity_events_entity_id", table_name="entity_events")
    op.drop_table("entity_events")
    op.drop_index("ix_commitments_to_entity_id", table_name="commitments")
    op.drop_index("ix_commitments_from_entity_id", table_name="commitments")
    op.drop_table("commitments")
    op.drop_index("ix_activities_client_entity_id", table_name="activities")
    op.drop_index("ix_activities_owner_entity_id", table_name="activities")
    op.drop_table("activities")
    op.drop_index("ix_group_memberships_entity_id", table_name="group_memberships")
    op.drop_index("ix_group_memberships_chat_id", table_name="group_memberships")
    op.drop_table("group_memberships")
    op.drop_index("ix_interaction_participants_entity_id", table_name="interaction_participants")
    op.drop_index("ix_interaction_participants_interaction_id", table_name="interaction_participants")
    op.drop_table("interaction_participants")
    op.drop_index("ix_entity_relation_members_entity", table_name="entity_relation_members")
    op.drop_table("entity_relation_members")
    op.drop_table("entity_relations")
    op.drop_index("ix_messages_timestamp", table_name="messages")
    op.drop_index("ix_messages_recipient_entity_id", table_name="messages")
    op.drop_index("ix_messages_sender_entity_id", table_name="messages")
    op.drop_index("ix_messages_chat_id", table_name="messages")
    op.drop_table("messages")
    op.drop_index("ix_entity_merge_audits_target_entity_id", table_name="entity_merge_audits")
    op.drop_index("ix_entity_merge_audits_source_entity_id", table_name="entity_merge_audits")
    op.drop_table("entity_merge_audits")
    op.drop_index("ix_dismissed_merge_suggestions_dismissed_entity_id", table_name="dismissed_merge_suggestions")
    op.drop_index("ix_dismissed_merge_suggestions_primary_entity_id", table_name="dismissed_merge_suggestions")
    op.drop_table("dismissed_merge_suggestions")
    op.drop_index("ix_entity_facts_entity_type", table_name="entity_facts")
    op.drop_index("ix_entity_facts_fact_type", table_name="entity_facts")
    op.drop_index("ix_entity_facts_entity_id", table_name="entity_facts")
    op.drop_table("entity_facts")
    op.drop_index("ix_entity_identifiers_entity_id", table_name="entity_identifiers")
    op.drop_table("entity_identifiers")
    op.drop_index("ix_entities_merged_into_id", table_name="entities")
    op.drop_index("ix_entities_deleted_at", table_name="entities")
    op.drop_index("ix_entities_name", table_name="entities")
    op.drop_table("entities")
