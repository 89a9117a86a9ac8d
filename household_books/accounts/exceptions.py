"""
Account Domain Errors

Rule violations raised by the connection manager and the deletion guard.
Every error builds its own message from the values it carries, so the text
shown to users and the data available to callers never drift apart.
"""


class DomainRuleError(Exception):
    """Base exception for account rule violations."""


class FriendNotFoundError(DomainRuleError):
    """The login ID doesn't belong to a friend of the account's owner."""

    def __init__(self, friend_login_id: str):
        self.friend_login_id = friend_login_id
        super().__init__(self.new_message(friend_login_id))

    @classmethod
    def new_message(cls, friend_login_id: str) -> str:
        return f"{friend_login_id} is not on your friend list."


class AccountNotFoundError(DomainRuleError):
    """The friend has no account with the requested name."""

    def __init__(self, friend_login_id: str, account_name: str):
        self.friend_login_id = friend_login_id
        self.account_name = account_name
        super().__init__(self.new_message(friend_login_id, account_name))

    @classmethod
    def new_message(cls, friend_login_id: str, account_name: str) -> str:
        return f"{friend_login_id} has no account named \"{account_name}\"."


class AlreadyConnectedError(DomainRuleError):
    """The account already points at the target."""

    def __init__(self, account_name: str, target_name: str):
        self.account_name = account_name
        self.target_name = target_name
        super().__init__(self.new_message(account_name, target_name))

    @classmethod
    def new_message(cls, account_name: str, target_name: str) -> str:
        return f"\"{account_name}\" is already connected to \"{target_name}\"."


class IncompatibleTypeError(DomainRuleError):
    """The target's type doesn't accept connections from the account's type."""

    def __init__(self, source_type_name: str, target_type_name: str):
        self.source_type_name = source_type_name
        self.target_type_name = target_type_name
        super().__init__(self.new_message(source_type_name, target_type_name))

    @classmethod
    def new_message(cls, source_type_name: str, target_type_name: str) -> str:
        return f"{source_type_name} cannot be connected to {target_type_name}."


class UsedAccountError(DomainRuleError):
    """The account is referenced by ledger entries and can't be deleted."""

    def __init__(self, type_name: str, account_name: str):
        self.type_name = type_name
        self.account_name = account_name
        super().__init__(self.new_message(type_name, account_name))

    @classmethod
    def new_message(cls, type_name: str, account_name: str) -> str:
        return f"{type_name} \"{account_name}\" is already in use and cannot be deleted."
