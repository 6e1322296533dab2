from assetdesk.modules.identity.schemas import NavItem, UserRole

NAV_ITEMS = [
    NavItem(page="assets", label="Assets", icon="images"),
]

ADMIN_ITEMS = [
    NavItem(page="admin-agents", label="Agents", icon="server", admin=True),
    NavItem(page="admin-invitations", label="Invitations", icon="users", admin=True),
    NavItem(page="admin-properties", label="Properties", icon="film", admin=True),
    NavItem(page="admin-characters", label="Characters", icon="tag", admin=True),
    NavItem(page="admin-config", label="Configuration", icon="settings", admin=True),
]

def navigation(role: UserRole | None) -> list[NavItem]:
    if role == "admin":
        return NAV_ITEMS + ADMIN_ITEMS
    return list(NAV_ITEMS)
