"""
Layout Module - Navigation
Sidebar menu per role
"""

from collections import namedtuple

from flask import url_for

from modules.auth.roles import Role


MenuItem = namedtuple('MenuItem', ['endpoint', 'label'])


MENUS = {
    Role.ADMIN: (
        MenuItem('dashboard.admin', 'Dashboard'),
        MenuItem('admin.users_list', 'User Management'),
        MenuItem('admin.departments_list', 'Departments'),
        MenuItem('surveys.surveys_list', 'Surveys'),
        MenuItem('reports.reports_index', 'Reports'),
        MenuItem('admin.activity_list', 'Activity Log'),
    ),
    Role.STAFF: (
        MenuItem('dashboard.staff', 'Dashboard'),
        MenuItem('surveys.surveys_list', 'My Surveys'),
        MenuItem('reports.reports_index', 'Responses'),
        MenuItem('notifications.notifications_list', 'Notifications'),
    ),
    Role.STUDENT: (
        MenuItem('dashboard.student', 'Dashboard'),
        MenuItem('responses.available', 'Available Surveys'),
        MenuItem('responses.my_responses', 'My Responses'),
        MenuItem('notifications.notifications_list', 'Notifications'),
    ),
}

# Used when the role is missing or not in MENUS
DEFAULT_MENU = (
    MenuItem('dashboard.index', 'Dashboard'),
)


def menu_for(role):
    """Menu items for a role (Role member or value); never empty"""
    return MENUS.get(Role.parse(role), DEFAULT_MENU)


def menu_links(role):
    """Menu items as JSON-ready links (needs an app context)"""
    return [
        {'label': item.label, 'endpoint': item.endpoint, 'url': url_for(item.endpoint)}
        for item in menu_for(role)
    ]
