"""initial family hub schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


gender_enum = postgresql.ENUM("male", "female", "other", name="genderenum", create_type=False)
user_role_enum = postgresql.ENUM("admin", "family_member", name="userroleenum", create_type=False)
user_status_enum = postgresql.ENUM("pending", "approved", "rejected", name="userstatusenum", create_type=False)
gallery_status_enum = postgresql.ENUM("pending", "approved", "rejected", name="gallerystatusenum", create_type=False)
event_type_enum = postgresql.ENUM("event", "holiday", "other", name="eventtypeenum", create_type=False)
notification_type_enum = postgresql.ENUM(
    "birthday_wish",
    "admin_broadcast",
    "system",
    "event",
    name="notificationtypeenum",
    create_type=False,
)

ENUMS = (
    gender_enum,
    user_role_enum,
    user_status_enum,
    gallery_status_enum,
    event_type_enum,
    notification_type_enum,
)


def _activity_columns() -> list[sa.Column]:
    return [
        sa.Column("last_active", sa.DateTime(), nullable=True),
        sa.Column("current_path", sa.String(length=255), nullable=True, server_default="/"),
        sa.Column("session_time_today", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("session_time_monthly", sa.Integer(), nullable=True, server_default="0"),
        sa.Column("session_time_yearly", sa.Integer(), nullable=True, server_default="0"),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum in ENUMS:
        enum.create(bind, checkfirst=True)

    op.create_table(
        "family_members",
        sa.Column("record_id", sa.Integer(), primary_key=True),
        sa.Column("member_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("nickname", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("gender", gender_enum, nullable=False),
        sa.Column("birth_date", sa.Date(), nullable=True),
        sa.Column("anniversary_date", sa.Date(), nullable=True),
        sa.Column("death_date", sa.Date(), nullable=True),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("spouse_id", sa.Integer(), nullable=True),
        sa.Column("generation", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avatar", sa.String(length=1024), nullable=True),
        sa.Column("occupation", sa.String(length=255), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        *_activity_columns(),
    )
    op.create_index("ix_family_members_member_id", "family_members", ["member_id"], unique=True)
    op.create_index("ix_family_members_parent_id", "family_members", ["parent_id"], unique=False)
    op.create_index("ix_family_members_spouse_id", "family_members", ["spouse_id"], unique=False)
    op.create_index("ix_family_members_generation", "family_members", ["generation"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("nickname", sa.String(length=255), nullable=True),
        sa.Column("role", user_role_enum, nullable=False, server_default="family_member"),
        sa.Column("status", user_status_enum, nullable=False, server_default="pending"),
        sa.Column("linked_member_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        *_activity_columns(),
    )

    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("event_type", event_type_enum, nullable=False, server_default="event"),
        sa.Column("created_by_email", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )

    op.create_table(
        "gallery_images",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_url", sa.String(length=1024), nullable=False),
        sa.Column("asset_id", sa.String(length=255), nullable=False),
        sa.Column(
            "uploaded_by_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("tagged_member_id", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("taken_on", sa.Date(), nullable=True),
        sa.Column("status", gallery_status_enum, nullable=False, server_default="pending"),
        sa.Column("batch_id", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_gallery_images_status_created", "gallery_images", ["status", "created_at"], unique=False)

    op.create_table(
        "chat_messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "sender_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "receiver_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("reply_to_id", sa.Integer(), sa.ForeignKey("chat_messages.id", ondelete="SET NULL"), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_group_chat", sa.Boolean(), nullable=True, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_chat_messages_sender_member_id", "chat_messages", ["sender_member_id"], unique=False)
    op.create_index("ix_chat_messages_receiver_member_id", "chat_messages", ["receiver_member_id"], unique=False)
    op.create_index("ix_chat_messages_expires_at", "chat_messages", ["expires_at"], unique=False)
    op.create_index("ix_chat_messages_group_created", "chat_messages", ["is_group_chat", "created_at"], unique=False)

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "recipient_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender_member_id", sa.Integer(), nullable=True),
        sa.Column("sender_name", sa.String(length=255), nullable=True),
        sa.Column("type", notification_type_enum, nullable=False, server_default="system"),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=True, server_default=sa.text("false")),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_notifications_recipient_member_id", "notifications", ["recipient_member_id"], unique=False)
    op.create_index("ix_notifications_recipient_read", "notifications", ["recipient_member_id", "is_read"], unique=False)

    op.create_table(
        "wishes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "sender_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "recipient_member_id",
            sa.Integer(),
            sa.ForeignKey("family_members.member_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("message", sa.String(length=500), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=True, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("sender_member_id", "recipient_member_id", "year", name="uq_wish_sender_recipient_year"),
    )


def downgrade() -> None:
    op.drop_table("wishes")
    op.drop_index("ix_notifications_recipient_read", table_name="notifications")
    op.drop_index("ix_notifications_recipient_member_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_chat_messages_group_created", table_name="chat_messages")
    op.drop_index("ix_chat_messages_expires_at", table_name="chat_messages")
    op.drop_index("ix_chat_messages_receiver_member_id", table_name="chat_messages")
    op.drop_index("ix_chat_messages_sender_member_id", table_name="chat_messages")
    op.drop_table("chat_messages")
    op.drop_index("ix_gallery_images_status_created", table_name="gallery_images")
    op.drop_table("gallery_images")
    op.drop_table("events")
    op.drop_table("users")
    op.drop_index("ix_family_members_generation", table_name="family_members")
    op.drop_index("ix_family_members_spouse_id", table_name="family_members")
    op.drop_index("ix_family_members_parent_id", table_name="family_members")
    op.drop_index("ix_family_members_member_id", table_name="family_members")
    op.drop_table("family_members")

    bind = op.get_bind()
    for enum in reversed(ENUMS):
        enum.drop(bind, checkfirst=True)
