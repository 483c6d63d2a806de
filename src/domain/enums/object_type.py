"""Object types that relations are granted on.

Structural parents:
    app -> org
    env_type -> app, org
    gpg_key -> org
    certificate -> org
    team -> org
"""

from enum import Enum


class ObjectType(str, Enum):
    """Object types of the authorization model."""

    ORG = "org"
    APP = "app"
    ENV_TYPE = "env_type"
    TEAM = "team"
    GPG_KEY = "gpg_key"
    CERTIFICATE = "certificate"
