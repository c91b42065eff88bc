"""
Amazon QLDB ledger client built on pyqldb.

Each run_transaction call is one driver.execute_lambda call, so the driver
owns the session lifetime, commits only when every statement succeeds, and
retries the whole transaction on OCC conflicts up to retry_limit.

Error mapping:
- botocore connection/timeout errors -> ConnectivityError
- ClientError OccConflictException (after retries) -> ConcurrencyExhausted
- any other ClientError / BotoCoreError / driver error -> LedgerError
"""

import logging
from typing import Any, List, Optional, Sequence, Set

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)
from pyqldb.config.retry_config import RetryConfig
from pyqldb.driver.qldb_driver import QldbDriver
from pyqldb.errors import is_occ_conflict_exception

from ..core.errors import ConcurrencyExhausted, ConnectivityError, LedgerError
from ..core.statements import Statement
from .client import LedgerClient

logger = logging.getLogger(__name__)

_CONNECTIVITY_ERRORS = (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)


class QldbLedgerClient(LedgerClient):
    """
    Destination ledger backed by Amazon QLDB.

    Credentials come from the standard boto3 chain (environment, role, profile).
    """

    def __init__(
        self,
        ledger_name: str,
        region: Optional[str] = None,
        retry_limit: int = 4,
        endpoint_url: Optional[str] = None,
        driver: Optional[Any] = None,
    ) -> None:
        """
        Initialize QLDB ledger client.

        Args:
            ledger_name: Destination ledger name
            region: AWS region (default: boto3 session default)
            retry_limit: OCC retries per transaction before giving up
            endpoint_url: Session API endpoint override
            driver: Pre-built driver (tests inject a stand-in here)

        Raises:
            LedgerError: If the driver cannot be created
        """
        self.ledger_name = ledger_name
        self.region = region
        self.retry_limit = retry_limit

        if driver is not None:
            self._driver = driver
            return

        try:
            session = boto3.session.Session(region_name=region)
            self._driver = QldbDriver(
                ledger_name,
                endpoint_url=endpoint_url,
                boto3_session=session,
                config=Config(connect_timeout=10, read_timeout=30),
                retry_config=RetryConfig(retry_limit=retry_limit),
            )
        except (BotoCoreError, ValueError, TypeError) as e:
            raise LedgerError(f"Failed to create QLDB driver for ledger '{ledger_name}': {e}") from e

    def list_table_names(self) -> Set[str]:
        try:
            # Materialize inside the try so a broken read never returns partially
            return set(self._driver.list_tables())
        except LedgerError:
            raise
        except Exception as e:
            raise self._translate(e, "list tables") from e

    def run_transaction(self, statements: Sequence[Statement]) -> List[List[Any]]:
        statements = list(statements)

        def _execute(executor) -> List[List[Any]]:
            results = []
            for stmt in statements:
                cursor = executor.execute_statement(stmt.text, *stmt.params)
                results.append(list(cursor))
            return results

        try:
            results = self._driver.execute_lambda(_execute)
        except LedgerError:
            raise
        except Exception as e:
            raise self._translate(e, f"execute {len(statements)} statement(s)") from e

        logger.debug(
            "Committed transaction",
            extra={"ledger": self.ledger_name, "statements": len(statements)},
        )
        return results

    def close(self) -> None:
        self._driver.close()

    def _translate(self, error: Exception, action: str) -> LedgerError:
        prefix = f"Failed to {action} on ledger '{self.ledger_name}'"
        if isinstance(error, _CONNECTIVITY_ERRORS):
            return ConnectivityError(f"{prefix}: ledger unreachable: {error}")
        if isinstance(error, ClientError):
            if is_occ_conflict_exception(error):
                return ConcurrencyExhausted(
                    f"{prefix}: OCC conflict persisted after {self.retry_limit} retries"
                )
            code = error.response.get("Error", {}).get("Code", "Unknown")
            return LedgerError(f"{prefix} (code: {code}): {error}")
        return LedgerError(f"{prefix}: {error}")
