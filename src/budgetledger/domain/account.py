"""Account domain service."""

from typing import Optional
from budgetledger.database.base import Database
from budgetledger.domain.entities import Account as AccountEntity, AccountType
from budgetledger.domain.errors import ConflictError, NotFoundError, account_not_found


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: AccountType = AccountType.CHEQUE,
        is_salary_account: bool = False,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: Cheque, savings or credit card
            is_salary_account: True if income is paid into this account

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists, or a second salary
                account is requested
        """
        accounts = self.db.list_accounts()
        for acc in accounts:
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")
            if is_salary_account and acc.is_salary_account:
                raise ConflictError(
                    f"Account '{acc.name}' is already the salary account"
                )

        return self.db.create_account(
            name=name, account_type=account_type, is_salary_account=is_salary_account
        )

    def get_account(self, name: str) -> Optional[AccountEntity]:
        """Get account by name.

        Args:
            name: Account name

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(name)

    def require_account(self, name: str) -> AccountEntity:
        """Get account by name or raise NotFoundError."""
        account = self.db.get_account(name)
        if account is None:
            raise NotFoundError(account_not_found(name))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
