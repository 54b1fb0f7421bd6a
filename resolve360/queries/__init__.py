# resolve360/queries/__init__.py
from .issue_queries import (
    create_issue,
    update_issue,
    get_issue_by_id,
    get_user_issues,
    get_all_issues,
    get_issues_by_status,
    get_contractor_issues,
    get_issue_statistics
)
from .user_queries import (
    get_user_by_id,
    create_user,
    update_user_role,
    set_user_active,
    get_all_users,
    get_users_by_role
)
from .store_errors import classify_store_error, translate_store_errors

__all__ = [
    # Issue queries
    'create_issue',
    'update_issue',
    'get_issue_by_id',
    'get_user_issues',
    'get_all_issues',
    'get_issues_by_status',
    'get_contractor_issues',
    'get_issue_statistics',

    # User queries
    'get_user_by_id',
    'create_user',
    'update_user_role',
    'set_user_active',
    'get_all_users',
    'get_users_by_role',

    'classify_store_error',
    'translate_store_errors'
]
