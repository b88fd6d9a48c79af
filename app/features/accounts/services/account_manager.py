from typing import Dict, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.features.accounts.models.account_property import AccountProperty, PropertyType
from app.features.auth.models.user import User

AccountData = Dict[str, AccountProperty]


class AccountManager:
    """Synchronous account storage used by background workers."""

    def __init__(self, db: Session, instance_host: str):
        self.db = db
        self.instance_host = instance_host

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_account_data(self, user: User) -> AccountData:
        """
        Return every known property of `user`, keyed by property name.

        Properties the user never set are filled with unsaved defaults so
        callers can update them like any other record.
        """
        rows = self.db.execute(
            select(AccountProperty).where(AccountProperty.user_id == user.id)
        ).scalars().all()
        data: AccountData = {row.name: row for row in rows}
        for prop in PropertyType:
            if prop.value not in data:
                data[prop.value] = AccountProperty.default_for(user.id, prop.value)
        return data

    def update_account_data(self, user: User, records: AccountData) -> None:
        """Persist `records`; pass only the properties that were changed."""
        for name, record in records.items():
            record.user_id = user.id
            record.name = name
            self.db.add(record)
        self.db.flush()

    def get_federation_id(self, user: User) -> str:
        return f"{user.username}@{self.instance_host}"
