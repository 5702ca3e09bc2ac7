"""
LDAP search filter builders.

Every user-supplied value goes through ``escape`` before it reaches a
filter string.

Dependencies: ldap3
System role: Safe filter construction
"""

from ldap3.utils.conv import escape_filter_chars

# Enabled person accounts: userAccountControl bit 2 (ACCOUNTDISABLE) unset
ACTIVE_USERS = (
    "(&(objectCategory=person)(objectClass=user)"
    "(!(userAccountControl:1.2.840.113556.1.4.803:=2)))"
)

USER_ATTRIBUTES = [
    "sAMAccountName",
    "cn",
    "displayName",
    "givenName",
    "sn",
    "mail",
    "userPrincipalName",
    "employeeID",
    "title",
    "department",
    "company",
    "telephoneNumber",
    "streetAddress",
    "l",
    "st",
    "description",
    "departmentNumber",
    "employeeType",
    "ou",
    "userAccountControl",
]


def escape(value: str) -> str:
    return escape_filter_chars(value)


def any_of(identifier: str, attributes: list[str]) -> str:
    """``(|(a1=v)(a2=v)...)`` with the value escaped."""
    safe = escape(identifier)
    return "(|" + "".join(f"({attr}={safe})" for attr in attributes) + ")"


def by_sam(sam: str) -> str:
    return f"(sAMAccountName={escape(sam)})"


def by_sam_or_employee_id(identifier: str) -> str:
    return any_of(identifier, ["sAMAccountName", "employeeID"])


def by_sam_or_upn(identifier: str) -> str:
    return any_of(identifier, ["sAMAccountName", "userPrincipalName"])


def by_any_identifier(identifier: str) -> str:
    """Match mail, username, UPN or CI."""
    return any_of(identifier, ["mail", "sAMAccountName", "userPrincipalName", "employeeID"])


def by_email(email: str) -> str:
    return any_of(email, ["company", "mail"])


def search_term(term: str) -> str:
    """Substring match over the names shown in the user list."""
    safe = escape(term)
    return (
        f"(&{ACTIVE_USERS}(|(cn=*{safe}*)(sAMAccountName=*{safe}*)"
        f"(mail=*{safe}*)(displayName=*{safe}*)))"
    )
