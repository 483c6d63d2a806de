"""Named capabilities of an effective permission snapshot.

Each capability maps to exactly one org relation (see
``CAPABILITY_RELATIONS`` in the authorization model). ``is_admin`` and
``is_master`` surface the admin/master relations under their legacy names.
"""

from enum import Enum


class Capability(str, Enum):
    """Org-wide capabilities of a (user, org) pair."""

    CAN_VIEW = "can_view"
    CAN_EDIT = "can_edit"
    HAVE_API_ACCESS = "have_api_access"
    HAVE_BILLING_OPTIONS = "have_billing_options"
    HAVE_WEBHOOK_ACCESS = "have_webhook_access"
    HAVE_GPG_ACCESS = "have_gpg_access"
    HAVE_CERT_ACCESS = "have_cert_access"
    HAVE_AUDIT_ACCESS = "have_audit_access"
    IS_ADMIN = "is_admin"
    IS_MASTER = "is_master"
    CAN_MANAGE_ROLES = "can_manage_roles"
    CAN_MANAGE_USERS = "can_manage_users"
    CAN_MANAGE_APPS = "can_manage_apps"
    CAN_MANAGE_TEAMS = "can_manage_teams"
    CAN_MANAGE_API_KEYS = "can_manage_api_keys"
    CAN_MANAGE_WEBHOOKS = "can_manage_webhooks"
    CAN_VIEW_AUDIT_LOGS = "can_view_audit_logs"
    CAN_MANAGE_ORG_SETTINGS = "can_manage_org_settings"
    CAN_MANAGE_INVITES = "can_manage_invites"
