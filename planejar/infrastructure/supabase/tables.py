"""Relational store table names (schema-in-code).

The schema itself is managed in the hosted backend. Use these constants
so table names stay consistent.

Example:
    from planejar.infrastructure.supabase.tables import TABLE_USERS

    rows = await store.table(TABLE_USERS).select().eq("role", "client").execute()
"""

# Users and their child records
TABLE_USERS = "users"
TABLE_QUALIFICATION_DATA = "partner_qualification_data"
TABLE_USER_DOCUMENTS = "user_documents"

# Projects and project-scoped records
TABLE_PROJECTS = "projects"
TABLE_PROJECT_CLIENTS = "project_clients"
TABLE_DOCUMENTS = "documents"
TABLE_TASKS = "tasks"
TABLE_CHAT_MESSAGES = "chat_messages"
TABLE_ACTIVITY_LOGS = "activity_logs"

# Phase data
TABLE_PHASE_1_DATA = "phase_1_data"
TABLE_PHASE_2_DATA = "phase_2_data"
TABLE_PHASE_2_PARTNERS = "phase_2_partners"
TABLE_PHASE_3_DATA = "phase_3_data"
TABLE_ASSETS = "assets"

TABLE_NOTIFICATIONS = "notifications"

# Children before parents; used when wiping demo data.
DELETION_ORDER: tuple[str, ...] = (
    TABLE_CHAT_MESSAGES,
    TABLE_ACTIVITY_LOGS,
    TABLE_TASKS,
    TABLE_NOTIFICATIONS,
    TABLE_USER_DOCUMENTS,
    TABLE_QUALIFICATION_DATA,
    TABLE_ASSETS,
    TABLE_PHASE_2_PARTNERS,
    TABLE_DOCUMENTS,
    TABLE_PHASE_1_DATA,
    TABLE_PHASE_2_DATA,
    TABLE_PHASE_3_DATA,
    TABLE_PROJECT_CLIENTS,
    TABLE_PROJECTS,
    TABLE_USERS,
)
