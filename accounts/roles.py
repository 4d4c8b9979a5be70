"""Role names carried as claims on users (stored as Django groups)."""

ADMINISTRATOR = "Administrator"
MANAGER = "Manager"

ROLES = (ADMINISTRATOR, MANAGER)
