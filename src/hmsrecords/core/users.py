"""Line codec for the user list (one header line, then one user per line)."""

from __future__ import annotations

from hmsrecords.exceptions import MalformedRecord, UnknownRole
from hmsrecords.grammar import FIELD_SEP, check_reserved, strip_line_ending
from hmsrecords.models import Role, User

USER_FIELDS = (
    "id",
    "name",
    "date_of_birth",
    "gender",
    "phone_number",
    "email_address",
    "password",
    "role",
)

USER_HEADER = "ID,Name,Date of Birth,Gender,Phone Number,Email Address,Password,Role"


def encode_user(user: User) -> str:
    values = [getattr(user, name) for name in USER_FIELDS[:-1]]
    for name, value in zip(USER_FIELDS, values):
        check_reserved("user", name, value)
    values.append(user.role.value)
    return FIELD_SEP.join(values)


def decode_user(line: str) -> User:
    """Parse ``id,name,dob,gender,phone,email,password,role``.

    Raises MalformedRecord on a field count other than eight or an empty id,
    UnknownRole when the role tag is not a Role value.
    """
    tokens = strip_line_ending(line).split(FIELD_SEP)
    if len(tokens) != len(USER_FIELDS):
        raise MalformedRecord(f"expected {len(USER_FIELDS)} fields, got {len(tokens)}")
    if not tokens[0]:
        raise MalformedRecord("empty user id", field="id")

    role_tag = tokens[-1].strip()
    try:
        role = Role(role_tag)
    except ValueError:
        raise UnknownRole(f"unknown user role {role_tag!r} for ID {tokens[0]}", field="role") from None

    try:
        return User(*tokens[:-1], role=role)
    except ValueError as e:
        raise MalformedRecord(str(e)) from e
