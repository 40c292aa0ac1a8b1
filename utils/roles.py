USER = "USER"
ADMIN = "ADMIN"

DEFAULT_ROLES = [USER, ADMIN]


def filter_role_names(roles):
    names = []
    for role in roles or []:
        name = role if isinstance(role, str) else getattr(role, "name", None)
        if name in DEFAULT_ROLES:
            names.append(name)
    return names
