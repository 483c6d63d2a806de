"""Relation names of the authorization model.

Relations fall into three groups:
    - Assignable roles on an object (master, admin, member, owner, editor, ...)
    - Capabilities, satisfied directly or by a stronger relation (can_view, ...)
    - Org-wide feature flags mirrored from role flags (have_api_access, ...)

Which relations are valid for which object type lives in
``src.domain.authorization_model``.
"""

from enum import Enum


class Relation(str, Enum):
    """Relation names (closed set)."""

    # Assignable roles
    MASTER = "master"
    ADMIN = "admin"
    MEMBER = "member"
    OWNER = "owner"
    MANAGER = "manager"
    SIGNER = "signer"
    EDITOR = "editor"
    VIEWER = "viewer"

    # Object capabilities
    CAN_VIEW = "can_view"
    CAN_EDIT = "can_edit"
    CAN_MANAGE = "can_manage"
    CAN_SIGN = "can_sign"
    CAN_REVOKE = "can_revoke"
    CAN_MANAGE_PROTECTED = "can_manage_protected"

    # Org feature flags
    HAVE_API_ACCESS = "have_api_access"
    HAVE_BILLING_OPTIONS = "have_billing_options"
    HAVE_WEBHOOK_ACCESS = "have_webhook_access"
    HAVE_GPG_ACCESS = "have_gpg_access"
    HAVE_CERT_ACCESS = "have_cert_access"
    HAVE_AUDIT_ACCESS = "have_audit_access"

    # Org management capabilities
    CAN_MANAGE_ROLES = "can_manage_roles"
    CAN_MANAGE_USERS = "can_manage_users"
    CAN_MANAGE_APPS = "can_manage_apps"
    CAN_MANAGE_TEAMS = "can_manage_teams"
    CAN_MANAGE_INVITES = "can_manage_invites"
    CAN_MANAGE_API_KEYS = "can_manage_api_keys"
    CAN_MANAGE_WEBHOOKS = "can_manage_webhooks"
    CAN_VIEW_AUDIT_LOGS = "can_view_audit_logs"
    CAN_MANAGE_ORG_SETTINGS = "can_manage_org_settings"
