"""
catalog_authz.policy.operations

Canonical authorizable operations.

Responsibilities:
- Enumerate the catalog operations policies are written against.
- Normalize an operation (enum member or free-form tag) to its uppercase action tag.
"""

from __future__ import annotations

import enum


class AuthorizableOperation(enum.StrEnum):
    # Values are the `action` field policies match on; treat as stable API contract.
    list_namespaces = "LIST_NAMESPACES"
    create_namespace = "CREATE_NAMESPACE"
    load_namespace_metadata = "LOAD_NAMESPACE_METADATA"
    namespace_exists = "NAMESPACE_EXISTS"
    drop_namespace = "DROP_NAMESPACE"
    update_namespace_properties = "UPDATE_NAMESPACE_PROPERTIES"

    list_tables = "LIST_TABLES"
    create_table_direct = "CREATE_TABLE_DIRECT"
    create_table_staged = "CREATE_TABLE_STAGED"
    register_table = "REGISTER_TABLE"
    load_table = "LOAD_TABLE"
    update_table = "UPDATE_TABLE"
    drop_table_without_purge = "DROP_TABLE_WITHOUT_PURGE"
    drop_table_with_purge = "DROP_TABLE_WITH_PURGE"
    table_exists = "TABLE_EXISTS"
    rename_table = "RENAME_TABLE"
    commit_transaction = "COMMIT_TRANSACTION"

    list_views = "LIST_VIEWS"
    create_view = "CREATE_VIEW"
    load_view = "LOAD_VIEW"
    replace_view = "REPLACE_VIEW"
    drop_view = "DROP_VIEW"
    view_exists = "VIEW_EXISTS"
    rename_view = "RENAME_VIEW"

    list_catalogs = "LIST_CATALOGS"
    create_catalog = "CREATE_CATALOG"
    get_catalog = "GET_CATALOG"
    update_catalog = "UPDATE_CATALOG"
    delete_catalog = "DELETE_CATALOG"

    list_principals = "LIST_PRINCIPALS"
    create_principal = "CREATE_PRINCIPAL"
    get_principal = "GET_PRINCIPAL"
    update_principal = "UPDATE_PRINCIPAL"
    delete_principal = "DELETE_PRINCIPAL"
    rotate_credentials = "ROTATE_CREDENTIALS"

    list_principal_roles = "LIST_PRINCIPAL_ROLES"
    create_principal_role = "CREATE_PRINCIPAL_ROLE"
    delete_principal_role = "DELETE_PRINCIPAL_ROLE"
    assign_principal_role = "ASSIGN_PRINCIPAL_ROLE"
    revoke_principal_role = "REVOKE_PRINCIPAL_ROLE"
    list_catalog_roles = "LIST_CATALOG_ROLES"
    create_catalog_role = "CREATE_CATALOG_ROLE"
    delete_catalog_role = "DELETE_CATALOG_ROLE"
    add_table_grant = "ADD_TABLE_GRANT_TO_CATALOG_ROLE"
    revoke_table_grant = "REVOKE_TABLE_GRANT_FROM_CATALOG_ROLE"

    list_policies = "LIST_POLICY"
    create_policy = "CREATE_POLICY"
    load_policy = "LOAD_POLICY"
    update_policy = "UPDATE_POLICY"
    drop_policy = "DROP_POLICY"
    attach_policy = "ATTACH_POLICY"
    detach_policy = "DETACH_POLICY"


def action_tag(operation: AuthorizableOperation | str) -> str:
    tag = str(operation).strip().upper()
    if not tag:
        raise ValueError("operation tag must not be empty")
    return tag
