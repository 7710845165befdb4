ROLE_USER = "user"
ROLE_COMMISSIONER = "commissioner"
ROLE_ADMIN = "admin"

ALL_ROLES = {ROLE_USER, ROLE_COMMISSIONER, ROLE_ADMIN}
